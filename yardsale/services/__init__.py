"""Service layer for Yard Sale Finder"""
