"""Clients domain - the editor's client directory"""
