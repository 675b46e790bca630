"""
Storefront setup wizard
"""
