"""
D8 hydrology over the elevation raster.

Pipeline:
1. Depression filling: interior cells strictly below all eight neighbours
   are raised to the lowest neighbour until a pass changes nothing.
   Boundary cells are outlets and keep their elevation.
2. Flow direction: steepest descent to one of eight neighbours, flats
   resolved by a breadth-first sweep from cells that already drain.
3. Accumulation: every cell starts at 1 and each cell adds the length of
   its flow path to the cell where that path terminates.

Direction codes: 0=N, 1=NE, 2=E, 3=SE, 4=S, 5=SW, 6=W, 7=NW, -1=terminal.
Row 0 is the northernmost row.
"""

import logging
import math
from collections import deque
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from agriterra.core.errors import InternalInvariantError
from agriterra.models.surface import FlowGrid, RasterGrid
from agriterra.models.terrain import DrainageAnalysis, DrainagePattern

logger = logging.getLogger(__name__)

# (row offset, column offset) per direction code
D8_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),  # N
    (-1, 1),  # NE
    (0, 1),  # E
    (1, 1),  # SE
    (1, 0),  # S
    (1, -1),  # SW
    (0, -1),  # W
    (-1, -1),  # NW
)
D8_DISTANCES = np.array([1.0 if (dr == 0 or dc == 0) else math.sqrt(2.0) for dr, dc in D8_OFFSETS])

NO_FLOW = -1

# Elevations closer than this are considered equal when resolving flats
FLAT_TOLERANCE = 1e-9

HIGH_FLOW_THRESHOLD = 100
MEDIUM_FLOW_THRESHOLD = 50
CHANNEL_THRESHOLD = 10

FloatGrid = NDArray[np.floating[Any]]
IntGrid = NDArray[np.integer[Any]]


def _neighbour_stack(values: FloatGrid, fill_value: float) -> FloatGrid:
    """Array of shape (8, N, N) holding each cell's neighbour in every direction."""
    n_rows, n_cols = values.shape
    padded = np.pad(values, 1, mode="constant", constant_values=fill_value)
    return np.stack(
        [padded[1 + dr : 1 + dr + n_rows, 1 + dc : 1 + dc + n_cols] for dr, dc in D8_OFFSETS]
    )


def _interior_mask(shape: Tuple[int, int]) -> NDArray[np.bool_]:
    mask = np.zeros(shape, dtype=bool)
    mask[1:-1, 1:-1] = True
    return mask


def fill_depressions(elevations: FloatGrid) -> Tuple[FloatGrid, int]:
    """
    Raise interior single-cell pits to their lowest neighbour until stable.

    Args:
        elevations: Square elevation grid

    Returns:
        Tuple of (filled grid, number of passes that changed something)

    Raises:
        InternalInvariantError: If filling does not settle within N² passes
    """
    filled = np.array(elevations, dtype=float, copy=True)
    interior = _interior_mask(filled.shape)
    max_passes = filled.size

    for passes in range(max_passes + 1):
        lowest = _neighbour_stack(filled, np.inf).min(axis=0)
        pits = interior & (filled < lowest)
        if not pits.any():
            return filled, passes
        filled[pits] = lowest[pits]

    raise InternalInvariantError(
        f"Depression filling did not settle within {max_passes} passes",
        invariant="fill_termination",
        details={"size": int(filled.shape[0])},
    )


def flow_directions(filled: FloatGrid) -> IntGrid:
    """
    D8 flow direction codes for a filled grid.

    Boundary cells are outlets (-1). Interior cells with a strictly lower
    neighbour point to the steepest drop per unit distance, ties broken by
    code order. Remaining flat cells take the direction toward their
    predecessor in a breadth-first sweep seeded by every cell that already
    drains; unreached cells stay terminal.

    Args:
        filled: Depression-filled square grid

    Returns:
        Integer grid of direction codes in [-1, 7]
    """
    n_rows, n_cols = filled.shape
    interior = _interior_mask(filled.shape)
    directions = np.full(filled.shape, NO_FLOW, dtype=np.int8)

    neighbours = _neighbour_stack(filled, np.inf)
    drops = (filled[np.newaxis, :, :] - neighbours) / D8_DISTANCES[:, np.newaxis, np.newaxis]
    steepest = np.argmax(drops, axis=0)
    resolved = interior & (drops.max(axis=0) > 0)
    directions[resolved] = steepest[resolved]

    # Breadth-first sweep across flats from draining cells and outlets
    reached = resolved | ~interior
    queue = deque(zip(*np.nonzero(reached)))
    while queue:
        row, col = queue.popleft()
        for code, (dr, dc) in enumerate(D8_OFFSETS):
            r, c = row + dr, col + dc
            if not (0 <= r < n_rows and 0 <= c < n_cols):
                continue
            if reached[r, c] or not interior[r, c]:
                continue
            if abs(filled[r, c] - filled[row, col]) > FLAT_TOLERANCE:
                continue
            # The neighbour drains back toward the cell that reached it
            directions[r, c] = (code + 4) % 8
            reached[r, c] = True
            queue.append((r, c))

    return directions


def flow_accumulation(directions: IntGrid) -> IntGrid:
    """
    Accumulate flow-path lengths at path terminals.

    Every cell starts at 1. Each cell's flow path is followed to its
    terminal cell, and the number of steps taken is added to that terminal.
    A revisited cell ends the walk.

    Args:
        directions: Direction code grid

    Returns:
        Integer accumulation grid, every value >= 1
    """
    n_rows, n_cols = directions.shape
    size = n_rows * n_cols
    codes = directions.ravel()

    downstream = np.full(size, NO_FLOW, dtype=np.int64)
    for code, (dr, dc) in enumerate(D8_OFFSETS):
        cells = np.nonzero(codes == code)[0]
        rows, cols = np.divmod(cells, n_cols)
        targets = (rows + dr) * n_cols + (cols + dc)
        downstream[cells] = targets

    accumulation = np.ones(size, dtype=np.int64)
    terminal = np.full(size, -1, dtype=np.int64)
    depth = np.zeros(size, dtype=np.int64)

    for start in range(size):
        if terminal[start] >= 0:
            continue

        path = []
        on_path = set()
        current = start
        while terminal[current] < 0 and downstream[current] != NO_FLOW:
            if current in on_path:
                logger.warning(f"Flow cycle detected at cell {current}, breaking walk")
                break
            on_path.add(current)
            path.append(current)
            current = int(downstream[current])

        if terminal[current] >= 0:
            end, base = int(terminal[current]), int(depth[current])
        else:
            end, base = current, 0
            terminal[current] = current
            depth[current] = 0

        for steps, cell in enumerate(reversed(path), start=1):
            if terminal[cell] < 0:
                terminal[cell] = end
                depth[cell] = base + steps

    np.add.at(accumulation, terminal, depth)
    return accumulation.reshape(n_rows, n_cols)


def route_flow(raster: RasterGrid) -> FlowGrid:
    """
    Run depression filling, flow direction and accumulation on a raster.

    Args:
        raster: Elevation raster

    Returns:
        FlowGrid
    """
    filled, passes = fill_depressions(raster.elevations)
    directions = flow_directions(filled)
    accumulation = flow_accumulation(directions)

    logger.debug(
        f"Routed flow on {raster.size}x{raster.size} grid: {passes} fill passes, "
        f"max accumulation {int(accumulation.max())}"
    )

    return FlowGrid(
        filled=filled,
        flow_direction=directions,
        accumulation=accumulation,
        fill_passes=passes,
    )


def classify_drainage_pattern(
    high_ratio: float, medium_ratio: float, low_ratio: float
) -> DrainagePattern:
    """Drainage pattern from the shares of high, medium and low flow cells."""
    if high_ratio * 100 > 30:
        return DrainagePattern.DENDRITIC
    if medium_ratio * 100 > 50:
        return DrainagePattern.TRELLIS
    if low_ratio * 100 > 70:
        return DrainagePattern.PARALLEL
    return DrainagePattern.RECTANGULAR


def analyze_drainage(
    raster: RasterGrid, area_sqm: float, flow: Optional[FlowGrid] = None
) -> DrainageAnalysis:
    """
    Drainage pattern, density and waterlogging risk.

    Args:
        raster: Elevation raster
        area_sqm: Polygon area in square meters
        flow: Precomputed flow grid, routed from the raster when omitted

    Returns:
        DrainageAnalysis
    """
    if flow is None:
        flow = route_flow(raster)

    accumulation = flow.accumulation
    total = accumulation.size

    high = int(np.count_nonzero(accumulation > HIGH_FLOW_THRESHOLD))
    medium = int(
        np.count_nonzero(
            (accumulation > MEDIUM_FLOW_THRESHOLD) & (accumulation <= HIGH_FLOW_THRESHOLD)
        )
    )
    low = int(np.count_nonzero(accumulation <= MEDIUM_FLOW_THRESHOLD))
    channels = int(np.count_nonzero(accumulation > CHANNEL_THRESHOLD))

    high_ratio = high / total
    medium_ratio = medium / total
    low_ratio = low / total

    # km of channel per km² of polygon
    density = (channels * raster.cell_size_m) / 1000.0 / (area_sqm / 1e6)
    waterlogging = min(1.0, 0.7 * high_ratio + 0.3 * medium_ratio)

    return DrainageAnalysis(
        pattern=classify_drainage_pattern(high_ratio, medium_ratio, low_ratio),
        density=density,
        waterlogging_risk=waterlogging,
        high_flow_ratio=high_ratio,
        medium_flow_ratio=medium_ratio,
        low_flow_ratio=low_ratio,
        max_accumulation=int(accumulation.max()),
        fill_passes=flow.fill_passes,
    )
