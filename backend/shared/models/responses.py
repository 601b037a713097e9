"""
Response models for Sortly services

Standardized envelope used by the service-level endpoints.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiResponse:
    """
    Standardized API response model

    Provides a consistent response structure for service endpoints.
    """

    status: str
    message: str
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response"""
        result = {"status": self.status, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result

    @classmethod
    def health_check(
        cls, service_name: str, version: str, description: Optional[str] = None
    ) -> "ApiResponse":
        """Create standardized health check response"""
        health_data = {"service": service_name, "version": version, "status": "healthy"}
        if description:
            health_data["description"] = description

        return cls(status="success", message="Service is healthy", data=health_data)
