class IndicatorBrowserError(Exception):
    """Base exception for all indicator_browser errors"""
    pass

class ConfigError(IndicatorBrowserError):
    """Invalid or inconsistent dataset config or global.json"""
    pass

class ParseError(IndicatorBrowserError):
    """
    Raw dataset text has no usable header row:
    empty text, blank header, or the configured period column is absent
    """
    pass

class FilterError(IndicatorBrowserError, ValueError):
    """A filter names a dimension the dataset does not have"""
    pass
