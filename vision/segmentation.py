"""
Color-based region segmentation.

Segmentation runs in four passes:

1. Growth: pixels are scanned in raster order; every unassigned pixel seeds a
   new segment that grows by 4-connected depth-first flood fill (explicit
   stack). A neighbor joins when its RGB distance to the seed's color is
   within tolerance.
2. Merge: every segment smaller than min_size is redirected to the adjacent
   segment with the nearest mean color.
3. Resolve: redirection chains are followed to their representative.
4. Recolor: each representative gets a display color from the color scheme.

Segment state lives in dense lists indexed by segment id.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from core.buffer import PixelBuffer
from core.constants import SegmentationConstants
from vision.color_utils import assign_segment_colors, color_distance

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass
class SegmentationResult:
    """Outcome of segment_image."""

    width: int
    height: int
    labels: np.ndarray  # representative id per pixel, raster order
    representatives: List[int]  # representative ids in display order
    pixel_counts: Dict[int, int]  # pixels per representative
    mean_colors: List[RGB] = field(default_factory=list)  # per raw segment id
    segment_count: int = 0  # raw segments before merging

    @property
    def region_count(self) -> int:
        return len(self.representatives)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def grow_segments(
    colors: Sequence[RGB], width: int, height: int, tolerance: float
) -> Tuple[List[int], List[int], List[RGB]]:
    """
    Flood-fill growth pass.

    Args:
        colors: RGB tuple per pixel in raster order
        width: Image width
        height: Image height
        tolerance: Maximum distance to the seed color

    Returns:
        (segment_map, pixel_counts, mean_colors), the latter two indexed by
        segment id
    """
    unassigned = SegmentationConstants.UNASSIGNED
    offsets = SegmentationConstants.NEIGHBOR_OFFSETS
    segment_map = [unassigned] * (width * height)
    pixel_counts: List[int] = []
    mean_colors: List[RGB] = []

    for seed in range(width * height):
        if segment_map[seed] != unassigned:
            continue

        segment = len(pixel_counts)
        base = colors[seed]
        segment_map[seed] = segment
        count = 1
        sum_r, sum_g, sum_b = base
        stack = [seed]

        while stack:
            current = stack.pop()
            cx, cy = current % width, current // width
            for dx, dy in offsets:
                nx, ny = cx + dx, cy + dy
                if nx < 0 or nx >= width or ny < 0 or ny >= height:
                    continue
                neighbor = ny * width + nx
                if segment_map[neighbor] != unassigned:
                    continue
                color = colors[neighbor]
                if color_distance(base, color) <= tolerance:
                    segment_map[neighbor] = segment
                    stack.append(neighbor)
                    count += 1
                    sum_r += color[0]
                    sum_g += color[1]
                    sum_b += color[2]

        pixel_counts.append(count)
        mean_colors.append(
            (
                _round_half_up(sum_r / count),
                _round_half_up(sum_g / count),
                _round_half_up(sum_b / count),
            )
        )

    return segment_map, pixel_counts, mean_colors


def ordered_adjacency(
    segment_map: np.ndarray, segments: Sequence[int]
) -> Dict[int, List[int]]:
    """
    4-adjacent segments of each requested segment, in discovery order.

    Discovery order is the order a raster scan over the segment's pixels
    finds them, checking left, right, up, down at each pixel.

    Args:
        segment_map: H x W array of segment ids
        segments: Segment ids to index

    Returns:
        Mapping of segment id to its neighbor ids (no duplicates)
    """
    height, width = segment_map.shape
    wanted = np.asarray(sorted(set(segments)), dtype=np.int64)
    order = np.arange(height * width, dtype=np.int64).reshape(height, width)
    offsets = SegmentationConstants.NEIGHBOR_OFFSETS

    keys, sources, targets = [], [], []
    for direction, (dx, dy) in enumerate(offsets):
        src_y = slice(max(0, -dy), height - max(0, dy))
        src_x = slice(max(0, -dx), width - max(0, dx))
        dst_y = slice(max(0, dy), height + min(0, dy))
        dst_x = slice(max(0, dx), width + min(0, dx))

        src = segment_map[src_y, src_x].ravel()
        dst = segment_map[dst_y, dst_x].ravel()
        mask = (src != dst) & np.isin(src, wanted)
        keys.append(order[src_y, src_x].ravel()[mask] * len(offsets) + direction)
        sources.append(src[mask])
        targets.append(dst[mask])

    adjacency: Dict[int, List[int]] = {int(s): [] for s in wanted}
    keys = np.concatenate(keys)
    scan = np.argsort(keys, kind="stable")
    sources = np.concatenate(sources)[scan].astype(np.int64)
    targets = np.concatenate(targets)[scan].astype(np.int64)

    span = int(segment_map.max()) + 1 if segment_map.size else 1
    _, first_seen = np.unique(sources * span + targets, return_index=True)
    for position in np.sort(first_seen):
        adjacency[int(sources[position])].append(int(targets[position]))
    return adjacency


def merge_small_segments(
    segment_map: np.ndarray,
    pixel_counts: Sequence[int],
    mean_colors: Sequence[RGB],
    min_size: int,
) -> List[int]:
    """
    Redirect undersized segments to their nearest-colored neighbor.

    Segments are processed in id order. Candidates are the current merge
    targets of the segment's neighbors, so a neighbor merged earlier in the
    pass is seen through one redirection. The strictly nearest mean color
    wins; ties keep the first candidate found.

    Returns:
        merge_target list indexed by segment id
    """
    merge_target = list(range(len(pixel_counts)))
    undersized = [i for i, count in enumerate(pixel_counts) if count < min_size]
    if not undersized:
        return merge_target

    adjacency = ordered_adjacency(segment_map, undersized)
    for segment in undersized:
        best = None
        best_distance = math.inf
        seen = set()
        for neighbor in adjacency[segment]:
            candidate = merge_target[neighbor]
            if candidate in seen:
                continue
            seen.add(candidate)
            distance = color_distance(mean_colors[segment], mean_colors[candidate])
            if distance < best_distance:
                best_distance = distance
                best = candidate
        if best is not None:
            merge_target[segment] = best

    return merge_target


def resolve_merges(merge_target: Sequence[int]) -> List[int]:
    """
    Follow redirections to a fixed point for every segment.

    Resolved chains are flattened as they are walked. Redirection cycles can
    only arise from one-hop candidates in the merge pass; a cycle resolves to
    its smallest id.
    """
    resolved = list(merge_target)
    for segment in range(len(resolved)):
        path: Dict[int, int] = {}
        walk: List[int] = []
        target = segment
        while resolved[target] != target and target not in path:
            path[target] = len(walk)
            walk.append(target)
            target = resolved[target]
        if target in path:
            target = min(walk[path[target]:])
            resolved[target] = target
        for visited in walk:
            resolved[visited] = target
    return resolved


def segment_image(buffer: PixelBuffer, tolerance: float, min_size: int) -> SegmentationResult:
    """
    Segment a buffer into color regions.

    Args:
        buffer: Input buffer
        tolerance: RGB distance cutoff from the seed color
        min_size: Segments with fewer pixels are merged into a neighbor

    Returns:
        SegmentationResult with one representative id per pixel
    """
    width, height = buffer.width, buffer.height
    pixels = buffer.to_array()
    colors = [tuple(rgb) for rgb in pixels[..., :3].reshape(-1, 3).tolist()]

    segment_map, pixel_counts, mean_colors = grow_segments(colors, width, height, tolerance)
    segment_grid = np.asarray(segment_map, dtype=np.int64).reshape(height, width)

    merge_target = merge_small_segments(segment_grid, pixel_counts, mean_colors, min_size)
    resolved = resolve_merges(merge_target)

    representatives: List[int] = []
    seen = set()
    for target in resolved:
        if target not in seen:
            seen.add(target)
            representatives.append(target)

    if resolved:
        labels = np.asarray(resolved, dtype=np.int64)[segment_grid.ravel()]
        counts = np.bincount(labels, minlength=len(resolved))
    else:
        labels = counts = np.zeros(0, dtype=np.int64)
    pixel_totals = {rep: int(counts[rep]) for rep in representatives}

    logger.debug(
        f"Segmentation: {len(pixel_counts)} raw segments, {len(representatives)} after merging"
    )

    return SegmentationResult(
        width=width,
        height=height,
        labels=labels,
        representatives=representatives,
        pixel_counts=pixel_totals,
        mean_colors=mean_colors,
        segment_count=len(pixel_counts),
    )


def apply_segmentation(
    buffer: PixelBuffer,
    tolerance: float,
    min_size: int,
    color_scheme="rainbow",
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Segment a buffer and paint every region with its scheme color.

    Args:
        buffer: Input buffer
        tolerance: RGB distance cutoff from the seed color
        min_size: Minimum region size before merging
        color_scheme: ColorScheme or name; unknown names fall back to rainbow
        rng: Random generator for the preserveBrightness scheme

    Returns:
        New buffer; alpha is copied from the source
    """
    result = segment_image(buffer, tolerance, min_size)
    pixels = buffer.to_array()
    if result.labels.size == 0:
        return PixelBuffer.from_array(pixels)

    colors = assign_segment_colors(result.representatives, result.mean_colors, color_scheme, rng)
    palette = np.zeros((result.segment_count, 3), dtype=np.uint8)
    for segment, rgb in colors.items():
        palette[segment] = rgb

    pixels[..., :3] = palette[result.labels].reshape(buffer.height, buffer.width, 3)
    return PixelBuffer.from_array(pixels)
