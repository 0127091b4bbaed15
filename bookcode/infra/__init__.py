"""bookcode.infra: configuration and health reporting."""

from bookcode.infra.config import CacheConfig as CacheConfig
from bookcode.infra.config import DownloadConfig as DownloadConfig
from bookcode.infra.config import default_cache_path as default_cache_path
from bookcode.infra.health import HealthCheckable as HealthCheckable
from bookcode.infra.health import HealthStatus as HealthStatus
from bookcode.infra.health import SystemHealth as SystemHealth
from bookcode.infra.health import readiness_check as readiness_check
