"""
Storage Module
==============

Disk cache of rendered portal images, keyed by address.
"""
