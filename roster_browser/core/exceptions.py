class RosterBrowserError(Exception):
    """Base exception for all roster_browser errors"""
    pass

class ConfigError(RosterBrowserError):
    """Invalid or inconsistent global.json or environment overrides"""
    pass

class DataSourceError(RosterBrowserError):
    """
    The remote backend reported an error (or could not be reached)
    """
    pass

class FetchError(DataSourceError):
    """
    A read failed. Raised for the whole fetch: rows drained before the
    failing page are discarded.
    """
    pass

class MutationError(DataSourceError):
    """Insert/update/delete rejected by the backend"""
    pass

class EmptySelectionError(RosterBrowserError):
    """A bulk action was requested with nothing selected"""
    pass

class BulkActionInFlightError(RosterBrowserError):
    """The same bulk action is still waiting on the backend"""
    pass
