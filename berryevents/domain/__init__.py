"""Domain packages - one per bounded area (cart, checkout, orders, pricing, accounts)"""
