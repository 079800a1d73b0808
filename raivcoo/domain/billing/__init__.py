"""Billing domain - pricing, checkout sessions, orders, payments and subscriptions"""
