"""
Custom exceptions for the rdesktop protocol plugin.

This module defines the exceptions raised throughout the plugin, covering
configuration loading, connection profile parsing, session bookkeeping and
the launch of the external rdesktop client.
"""

from typing import Optional, Dict, Any, List


class RdesktopPluginException(Exception):
    """
    Base exception for all rdesktop plugin errors.
    
    This is the root exception class that all other plugin exceptions inherit from.
    It provides common functionality for error reporting and debugging.
    """
    
    def __init__(
        self, 
        message: str, 
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


class SpawnError(RdesktopPluginException):
    """
    Raised when the external client process cannot be started.
    
    This exception is thrown by the process launcher when:
    - The client executable is not found on PATH
    - The executable exists but is not runnable
    - The operating system refuses to create the process
    
    ``os_error`` carries the underlying OS error text, which is what the
    host shows to the user.
    """
    
    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        os_error: Optional[str] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})
        if command:
            details['executable'] = command[0]
        if os_error:
            details['os_error'] = os_error
        
        super().__init__(
            message=message,
            error_code=kwargs.get('error_code', 'SPAWN_FAILED'),
            details=details
        )
        self.command = command or []
        self.os_error = os_error or message


class ProfileError(RdesktopPluginException):
    """
    Raised when a connection profile cannot be loaded.
    
    Only profile files read by this package raise it; profiles handed over
    by the host are trusted as-is.
    """
    
    def __init__(
        self,
        message: str,
        profile_path: Optional[str] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})
        if profile_path:
            details['profile_path'] = profile_path
        
        super().__init__(
            message=message,
            error_code=kwargs.get('error_code', 'PROFILE_INVALID'),
            details=details
        )
        self.profile_path = profile_path


class SessionStateError(RdesktopPluginException):
    """Raised when a lifecycle entry point runs on a widget that was never initialized."""
    
    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})
        if operation:
            details['operation'] = operation
        
        super().__init__(
            message=message,
            error_code=kwargs.get('error_code', 'SESSION_NOT_INITIALIZED'),
            details=details
        )
        self.operation = operation


class ConfigurationError(RdesktopPluginException):
    """
    Raised when configuration validation fails.
    
    This exception is thrown when:
    - Required configuration parameters are missing
    - Configuration values are invalid
    - Configuration files cannot be read or parsed
    """
    
    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        
        super().__init__(
            message=message,
            error_code=kwargs.get('error_code', 'CONFIGURATION_ERROR'),
            details=details
        )
        self.config_key = config_key
        self.config_value = config_value
