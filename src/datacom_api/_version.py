VERSION = "0.2.0"
__version__ = VERSION
