"""Yard Sale Finder: location-based search for local yard, garage and estate sales."""
