"""HTTP API package"""
