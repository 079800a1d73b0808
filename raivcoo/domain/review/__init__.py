"""Review domain - public access to shared review links"""
