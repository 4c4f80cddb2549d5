"""Daycare membership hours package.

Organized by feature modules (members, attendance, payments) with a thin Flask
controller layer over service/repository layers.
"""
