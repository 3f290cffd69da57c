"""
Root exception type shared by geotime libraries.
"""


class GeotimeError(Exception):
    """Base class for every error raised by geotime code, dood!"""

    pass
