"""
GPU utilisation reader

Two counter sources, tried in order:

    amdgpu sysfs   /sys/class/drm/card<N>/device/gpu_busy_percent (overall utilisation only)
    nvidia-smi     --query-gpu=utilization.{gpu,encoder,decoder}

A machine with neither has no GPU counter; construction raises
DataUnavailableError and the widget shows its placeholder.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from ..config import system as system_config
from ..errors import ConfigurationError, DataUnavailableError

logger = logging.getLogger(__name__)

DRM_ROOT = Path('/sys/class/drm')

METRIC_UTILIZATION = 'utilization'
METRIC_UTILIZATION_3D = 'utilization_3d'
METRIC_UTILIZATION_COPY = 'utilization_copy'
METRIC_UTILIZATION_ENCODE = 'utilization_video_encode'
METRIC_UTILIZATION_DECODE = 'utilization_video_decode'

GPU_METRICS = (
    METRIC_UTILIZATION,
    METRIC_UTILIZATION_3D,
    METRIC_UTILIZATION_COPY,
    METRIC_UTILIZATION_ENCODE,
    METRIC_UTILIZATION_DECODE,
)

_NVIDIA_FIELDS = {
    METRIC_UTILIZATION: 'utilization.gpu',
    METRIC_UTILIZATION_ENCODE: 'utilization.encoder',
    METRIC_UTILIZATION_DECODE: 'utilization.decoder',
}

SYSFS = 'sysfs'
NVIDIA_SMI = 'nvidia-smi'


def validate_metric(metric: str) -> str:
    if metric not in GPU_METRICS:
        raise ConfigurationError(
            f"unsupported GPU metric '{metric}' (supported: {', '.join(GPU_METRICS)})")
    return metric


class GpuReader:
    """
    Percent utilisation of one adapter.

    Args:
        adapter: Card index (card<N> in sysfs, -i <N> for nvidia-smi)
        metric: One of GPU_METRICS
        drm_root: DRM sysfs directory (overridable for tests)
        timeout: nvidia-smi timeout in seconds

    Raises:
        ConfigurationError: unknown metric
        DataUnavailableError: no counter for this adapter and metric
    """

    def __init__(self, adapter: int = 0, metric: str = METRIC_UTILIZATION,
                 drm_root: Path = DRM_ROOT, timeout: float = system_config.SUBPROCESS_TIMEOUT):
        self.adapter = int(adapter)
        self.metric = validate_metric(metric)
        self.timeout = timeout
        self.busy_path = Path(drm_root) / f'card{self.adapter}' / 'device' / 'gpu_busy_percent'
        self.source = self._find_source()
        logger.info(f"GPU reader for adapter {self.adapter} ({self.metric}) using {self.source}")

    def _find_source(self) -> str:
        if self.metric == METRIC_UTILIZATION and self.busy_path.is_file():
            return SYSFS
        if self.metric in _NVIDIA_FIELDS and shutil.which('nvidia-smi'):
            return NVIDIA_SMI
        raise DataUnavailableError(
            f"no GPU counter for adapter {self.adapter} metric '{self.metric}'")

    def sample(self) -> float:
        if self.source == SYSFS:
            try:
                raw = self.busy_path.read_text()
            except OSError as e:
                raise DataUnavailableError(f"cannot read {self.busy_path}: {e}") from e
        else:
            raw = self._query_nvidia()
        return _parse_percent(raw)

    def _query_nvidia(self) -> str:
        cmd = ['nvidia-smi', f'--query-gpu={_NVIDIA_FIELDS[self.metric]}',
               '--format=csv,noheader,nounits', '-i', str(self.adapter)]
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as e:
            raise DataUnavailableError(f"nvidia-smi failed: {e}") from e
        if result.returncode != 0:
            raise DataUnavailableError(f"nvidia-smi exited with {result.returncode}")
        return result.stdout.decode('utf-8', errors='replace')

    def close(self):
        pass


def _parse_percent(raw: str) -> float:
    lines = raw.strip().splitlines()
    try:
        return float(lines[0])
    except (IndexError, ValueError):
        raise DataUnavailableError(f"unreadable GPU counter value {raw!r}") from None
