"""
Storefront Service - game server shop backend
"""
