"""
Data access for apps and users, read through the query caches.
"""
