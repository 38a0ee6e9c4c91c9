from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import Iterator

from tripplanner.app.ports.output import ITransitRepository
from tripplanner.domain.models import Edge, EdgeKind, GeoPoint, Line, Stop
from tripplanner.domain.models.edge import EdgeKey
from tripplanner.domain.models.network import TransitNetwork

logger = logging.getLogger(__name__)


def _rows(
    path: Path, encoding: str, min_fields: int
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, stripped fields) for each usable row of a ';' file."""

    with path.open("r", encoding=encoding, newline="") as fp:
        reader = csv.reader(fp, delimiter=";", skipinitialspace=True)
        for row in reader:
            fields = [f.strip() for f in row]
            # Rows may end with a trailing separator.
            while fields and not fields[-1]:
                fields.pop()
            if not fields or fields[0].startswith("#"):
                continue
            if len(fields) < min_fields:
                logger.warning(
                    "%s:%d: expected at least %d fields, got %d",
                    path.name,
                    reader.line_num,
                    min_fields,
                    len(fields),
                )
                continue
            yield reader.line_num, fields


@dataclass(slots=True)
class TextTransitRepository(ITransitRepository):
    """Loads a transit network from semicolon-separated text files.

    Files (inside the data directory):
      - stops.txt: code;address;lat;lon (decimal commas accepted)
      - lines.txt: code;name;stop;stop;...
      - frequencies.txt: line;day;HH:MM[:SS] (day 1=Monday .. 7=Sunday)
      - segments.txt: origin;destination;seconds;kind (1=ride, 2=walk)

    Env vars:
      - TRANSIT_DATA_PATH: data directory (default: data/sample)
      - TRANSIT_DATA_ENCODING: file encoding (default: iso-8859-1)

    Malformed rows are skipped with a warning. Walking rows also produce the
    opposite direction.
    """

    base_path: str | Path | None = None
    encoding: str | None = None

    stops_file: str = "stops.txt"
    lines_file: str = "lines.txt"
    frequencies_file: str = "frequencies.txt"
    segments_file: str = "segments.txt"

    def _base(self) -> Path:
        value = self.base_path or os.getenv("TRANSIT_DATA_PATH") or "data/sample"
        return Path(value)

    def _encoding(self) -> str:
        return self.encoding or os.getenv("TRANSIT_DATA_ENCODING") or "iso-8859-1"

    def load_network(self) -> TransitNetwork:
        base = self._base()
        encoding = self._encoding()

        stops = self._load_stops(base / self.stops_file, encoding)
        lines = self._load_lines(
            base / self.lines_file, base / self.frequencies_file, encoding, stops
        )
        edges = self._load_edges(base / self.segments_file, encoding, stops)

        logger.info(
            "Loaded %d stops, %d lines and %d edges from %s",
            len(stops),
            len(lines),
            len(edges),
            base,
        )
        return TransitNetwork(
            stops_by_code=stops, lines_by_code=lines, edges_by_key=edges
        )

    def _load_stops(self, path: Path, encoding: str) -> dict[int, Stop]:
        stops: dict[int, Stop] = {}
        for lineno, fields in _rows(path, encoding, min_fields=4):
            try:
                code = int(fields[0])
                location = GeoPoint.parse(fields[2], fields[3])
            except ValueError as exc:
                logger.warning("%s:%d: skipping stop: %s", path.name, lineno, exc)
                continue
            stops[code] = Stop(code=code, address=fields[1], location=location)
        return stops

    def _load_lines(
        self, path: Path, freq_path: Path, encoding: str, stops: dict[int, Stop]
    ) -> dict[str, Line]:
        paths: dict[str, tuple[str, list[int]]] = {}
        for lineno, fields in _rows(path, encoding, min_fields=3):
            code, name = fields[0], fields[1]
            stop_codes: list[int] = []
            for raw in fields[2:]:
                try:
                    stop_code = int(raw)
                except ValueError:
                    logger.warning(
                        "%s:%d: line %s has invalid stop %r",
                        path.name,
                        lineno,
                        code,
                        raw,
                    )
                    continue
                if stop_code not in stops:
                    logger.warning(
                        "%s:%d: line %s references unknown stop %d",
                        path.name,
                        lineno,
                        code,
                        stop_code,
                    )
                    continue
                # Circular lines list their first stop again at the end.
                if stop_code in stop_codes:
                    continue
                stop_codes.append(stop_code)

            if not stop_codes:
                logger.warning("%s:%d: line %s has no stops", path.name, lineno, code)
                continue
            paths[code] = (name, stop_codes)

        departures: dict[str, dict[int, list[time]]] = {}
        for lineno, fields in _rows(freq_path, encoding, min_fields=3):
            code = fields[0]
            if code not in paths:
                logger.warning(
                    "%s:%d: departure for unknown line %s", freq_path.name, lineno, code
                )
                continue
            try:
                day = int(fields[1])
                at = time.fromisoformat(fields[2])
            except ValueError as exc:
                logger.warning(
                    "%s:%d: skipping departure: %s", freq_path.name, lineno, exc
                )
                continue
            if not 1 <= day <= 7:
                logger.warning(
                    "%s:%d: day of week out of range: %d", freq_path.name, lineno, day
                )
                continue
            departures.setdefault(code, {}).setdefault(day, []).append(at)

        return {
            code: Line(
                code=code,
                name=name,
                stops=tuple(stop_codes),
                departures={d: tuple(t) for d, t in departures.get(code, {}).items()},
            )
            for code, (name, stop_codes) in paths.items()
        }

    def _load_edges(
        self, path: Path, encoding: str, stops: dict[int, Stop]
    ) -> dict[EdgeKey, Edge]:
        edges: dict[EdgeKey, Edge] = {}
        for lineno, fields in _rows(path, encoding, min_fields=4):
            try:
                edge = Edge(
                    origin=int(fields[0]),
                    destination=int(fields[1]),
                    duration_s=int(fields[2]),
                    kind=EdgeKind(int(fields[3])),
                )
            except ValueError as exc:
                logger.warning("%s:%d: skipping segment: %s", path.name, lineno, exc)
                continue

            missing = [c for c in (edge.origin, edge.destination) if c not in stops]
            if missing:
                logger.warning(
                    "%s:%d: segment references unknown stop %d",
                    path.name,
                    lineno,
                    missing[0],
                )
                continue

            edges[edge.key] = edge
            if edge.kind == EdgeKind.WALK:
                edges.setdefault(edge.mirrored().key, edge.mirrored())

        return edges
