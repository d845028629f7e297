"""
Assembly of decoded rays into a radar volume and the moment extraction API.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from .constants import (
    VOLUME_HEADER_SIZE,
    VOLUME_JULIAN_OFFSET,
    VOLUME_MS_OFFSET,
    VOLUME_STATION_OFFSET,
)
from .errors import EmptyVolumeError, VolumeHeaderError
from .messages import iter_rays
from .models import DecodeStats, Ray, SiteLocation, Sweep, SweepData
from .reader import ByteReader, BytesLike
from .records import Decompressor, iter_records
from .utils import julian_to_datetime, strip_padding

logger = logging.getLogger(__name__)


class RadarVolume:
    """
    A decoded Level 2 volume.

    Rays are grouped by the raw sweep (elevation) number they carry. Sweep
    numbers are sorted ascending and renumbered densely from 0, so a file
    holding sweeps 3, 1 and 2 yields sweeps 0, 1 and 2 for raw numbers 1, 2
    and 3. Within a sweep rays keep file order.

    Instances are built by ``read_level2`` / ``read_level2_file`` and are
    read-only afterwards.

    Attributes
    ----------
    station_id : str
        Four letter station identifier
    timestamp : datetime or None
        Volume collection time (UTC)
    vcp : int
        Volume coverage pattern number, 0 when unknown
    site : SiteLocation or None
        Radar position from the first volume data block seen
    stats : DecodeStats
        Counters collected while decoding
    """

    def __init__(
        self,
        station_id: str,
        timestamp: Optional[datetime],
        vcp: int,
        rays_by_sweep: Dict[int, List[Ray]],
        site: Optional[SiteLocation] = None,
        stats: Optional[DecodeStats] = None,
    ):
        self.station_id = station_id
        self.timestamp = timestamp
        self.vcp = vcp
        self.site = site
        self.stats = stats if stats is not None else DecodeStats()

        numbers = sorted(n for n, rays in rays_by_sweep.items() if rays)
        self._rays = [tuple(rays_by_sweep[n]) for n in numbers]
        self._sweeps = [
            Sweep(
                index=i,
                elevation=round(float(np.mean([r.elevation for r in rays])), 2),
                ray_count=len(rays),
                number=n,
            )
            for i, (n, rays) in enumerate(zip(numbers, self._rays))
        ]
        if not self._sweeps:
            raise EmptyVolumeError("File contains no valid radar data")

    def __repr__(self) -> str:
        return (
            f"RadarVolume(station_id={self.station_id!r}, "
            f"timestamp={self.timestamp}, vcp={self.vcp}, "
            f"n_sweeps={len(self._sweeps)}, moments={self.moments})"
        )

    @property
    def sweeps(self) -> List[Sweep]:
        """Sweep metadata, ordered by index."""
        return list(self._sweeps)

    @property
    def moments(self) -> List[str]:
        """Sorted names of every moment present anywhere in the volume."""
        names = set()
        for rays in self._rays:
            for ray in rays:
                names.update(ray.moments)
        return sorted(names)

    def _check_index(self, sweep_index: int) -> None:
        if not 0 <= sweep_index < len(self._rays):
            raise IndexError(f"Sweep index {sweep_index} out of range")

    def get_sweep(self, sweep_index: int) -> Sweep:
        self._check_index(sweep_index)
        return self._sweeps[sweep_index]

    def get_rays(self, sweep_index: int) -> tuple:
        """Return the rays of one sweep in file order."""
        self._check_index(sweep_index)
        return self._rays[sweep_index]

    def get_moments_for_sweep(self, sweep_index: int) -> List[str]:
        """
        Sorted names of the moments present in one sweep.

        Raises
        ------
        IndexError
            If ``sweep_index`` is out of range
        """
        self._check_index(sweep_index)
        names = set()
        for ray in self._rays[sweep_index]:
            names.update(ray.moments)
        return sorted(names)

    def get_data(self, sweep_index: int, moment: str) -> SweepData:
        """
        Extract one moment of one sweep as flat arrays.

        Gate geometry comes from the first ray of the sweep that carries the
        moment. Rays without the moment are left as NaN; rays with fewer
        gates are padded with NaN and rays with more are truncated.

        Parameters
        ----------
        sweep_index : int
            Dense sweep index
        moment : str
            Moment identifier, e.g. 'REF'

        Returns
        -------
        SweepData

        Raises
        ------
        IndexError
            If ``sweep_index`` is out of range
        KeyError
            If no ray of the sweep carries ``moment``
        """
        self._check_index(sweep_index)
        rays = self._rays[sweep_index]

        template = next((r.moments[moment] for r in rays if moment in r.moments), None)
        if template is None:
            raise KeyError(f"Moment '{moment}' not available in sweep {sweep_index}")

        n_rays = len(rays)
        n_gates = template.gate_count
        ranges = template.ranges()
        azimuths = np.array([r.azimuth for r in rays], dtype="float32")

        data = np.full((n_rays, n_gates), np.nan, dtype="float32")
        for i, ray in enumerate(rays):
            record = ray.moments.get(moment)
            if record is None:
                continue
            limit = min(record.gate_count, n_gates)
            data[i, :limit] = record.data[:limit]

        return SweepData(
            moment=moment,
            sweep_index=sweep_index,
            data=data.ravel(),
            azimuths=azimuths,
            ranges=ranges,
            elevation=self._sweeps[sweep_index].elevation,
            dims=(n_rays, n_gates),
        )


def read_volume_header(reader: ByteReader) -> Tuple[str, Optional[datetime]]:
    """
    Read station id and timestamp from the 24-byte volume header.

    Raises
    ------
    VolumeHeaderError
        If the buffer is shorter than the header
    """
    if len(reader) < VOLUME_HEADER_SIZE:
        raise VolumeHeaderError(
            f"File too small: {len(reader)} bytes, volume header needs {VOLUME_HEADER_SIZE}"
        )
    station_id = strip_padding(reader.text_at(VOLUME_STATION_OFFSET, 4))
    timestamp = julian_to_datetime(
        reader.u16_at(VOLUME_JULIAN_OFFSET), reader.u32_at(VOLUME_MS_OFFSET)
    )
    return station_id, timestamp


def read_level2(buffer: BytesLike, decompress: Optional[Decompressor] = None) -> RadarVolume:
    """
    Decode a complete Level 2 archive held in memory.

    Damaged records, messages and rays are skipped; only a missing volume
    header or a volume without a single valid ray is fatal.

    Parameters
    ----------
    buffer : bytes-like
        Full file contents
    decompress : callable, optional
        Decompressor for compressed records, ``bytes -> bytes``
        (default: ``bz2.decompress``)

    Returns
    -------
    RadarVolume

    Raises
    ------
    VolumeHeaderError
        If the buffer cannot hold the 24-byte volume header
    EmptyVolumeError
        If no valid ray was decoded
    """
    reader = ByteReader(buffer)
    station_id, timestamp = read_volume_header(reader)

    stats = DecodeStats()
    rays_by_sweep: Dict[int, List[Ray]] = {}
    ray_station = None
    vcp = 0
    site = None

    body = reader.bytes_at(VOLUME_HEADER_SIZE, len(reader) - VOLUME_HEADER_SIZE)
    for segment in iter_records(body, decompress=decompress, stats=stats):
        for ray in iter_rays(segment, stats):
            rays_by_sweep.setdefault(ray.sweep_number, []).append(ray)
            if ray_station is None and ray.station_id:
                ray_station = ray.station_id
            if timestamp is None and ray.timestamp is not None:
                timestamp = ray.timestamp
            if not vcp and ray.vcp:
                vcp = ray.vcp
            if site is None and ray.site is not None:
                site = ray.site

    volume = RadarVolume(
        station_id=ray_station or station_id,
        timestamp=timestamp,
        vcp=vcp,
        rays_by_sweep=rays_by_sweep,
        site=site,
        stats=stats,
    )
    logger.info(
        f"Decoded {volume.station_id}: {len(volume.sweeps)} sweeps, "
        f"{stats.rays_accepted} rays ({stats.rays_rejected} rejected), "
        f"{stats.records} records ({stats.failed_decompressions} failed)"
    )
    return volume


def read_level2_file(path: Union[str, Path], decompress: Optional[Decompressor] = None) -> RadarVolume:
    """Read a whole Level 2 file into memory and decode it."""
    data = Path(path).read_bytes()
    return read_level2(data, decompress=decompress)
