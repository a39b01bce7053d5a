"""Pixel webhook resource.

Usage
-----
Import the resource for route registration::

    from pixelhook.api.pixel.resources import PixelResource
"""
