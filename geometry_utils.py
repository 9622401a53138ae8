# Copyright 2023 Andrew Holliday
# 
# This file is part of the Transit Learning project.
#
# Transit Learning is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by the Free 
# Software Foundation, either version 3 of the License, or (at your option) any 
# later version.
# 
# Transit Learning is distributed in the hope that it will be useful, but 
# WITHOUT ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or 
# FITNESS FOR A PARTICULAR PURPOSE. See the GNU General Public License for more 
# details.
#
# You should have received a copy of the GNU General Public License along with 
# Transit Learning. If not, see <https://www.gnu.org/licenses/>.

import numpy as np


# squared distance under which two endpoints count as the same point
SHARED_ENDPOINT_SQ_TOL = 1e-5
# cross products smaller than this are treated as collinear
COLLINEAR_EPS = 1e-7


def as_point(pp):
    return np.asarray(pp, dtype=float)


def squared_distance(pp, qq):
    diff = as_point(pp) - as_point(qq)
    return float(np.dot(diff, diff))


def distance(pp, qq):
    return float(np.sqrt(squared_distance(pp, qq)))


def orientation(aa, bb, cc):
    """Signed area (times two) of the triangle aa, bb, cc.  Positive means a
    counter-clockwise turn, negative clockwise, zero collinear."""
    aa, bb, cc = as_point(aa), as_point(bb), as_point(cc)
    ab = bb - aa
    ac = cc - aa
    return float(ab[0] * ac[1] - ab[1] * ac[0])


def _opposite_sides(o1, o2):
    return (o1 > COLLINEAR_EPS and o2 < -COLLINEAR_EPS) or \
        (o1 < -COLLINEAR_EPS and o2 > COLLINEAR_EPS)


def segments_intersect(aa, bb, cc, dd):
    """Returns True iff the open segments aa-bb and cc-dd cross.

    Segments that share an endpoint never count as crossing, since links fan
    out from a common station.  Collinear overlaps are not detected.
    """
    for pp in (aa, bb):
        for qq in (cc, dd):
            if squared_distance(pp, qq) < SHARED_ENDPOINT_SQ_TOL:
                return False

    return _opposite_sides(orientation(aa, bb, cc), orientation(aa, bb, dd)) \
        and _opposite_sides(orientation(cc, dd, aa), orientation(cc, dd, bb))


def segment_crosses_any(aa, bb, segments):
    """segments: an iterable of (start, end) point pairs."""
    return any(segments_intersect(aa, bb, cc, dd) for cc, dd in segments)


def point_to_segment_distance(pp, aa, bb):
    pp, aa, bb = as_point(pp), as_point(aa), as_point(bb)
    ab = bb - aa
    seg_sq_len = float(np.dot(ab, ab))
    if seg_sq_len == 0:
        # degenerate segment, so it's just a point
        return distance(pp, aa)
    tt = np.clip(np.dot(pp - aa, ab) / seg_sq_len, 0.0, 1.0)
    projection = aa + tt * ab
    return distance(pp, projection)
