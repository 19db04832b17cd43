from __future__ import annotations
import math
import re
from typing import List, Optional, Tuple
from arc_approximator import approximate_scaled

Point = Tuple[float, float]

command_pattern = re.compile(r'([MmLlHhVvCcSsQqTtAaZz])')
number_pattern = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
flag_pattern = re.compile(r'[\s,]*([01])')
arc_number_pattern = re.compile(r'[\s,]*(' + number_pattern.pattern + ')')

ARGUMENT_COUNTS = {'M': 2, 'L': 2, 'H': 1, 'V': 1, 'C': 6, 'S': 4, 'Q': 4, 'T': 2, 'A': 7, 'Z': 0}

def parse_path_arguments(cmd: str, text: str) -> List[float]:
    if cmd.upper() != 'A':
        return [float(n) for n in number_pattern.findall(text)]

    # arc flags may be written without separators, e.g. "a1 1 0 00 5 5"
    values = []
    pos = 0
    while True:
        index = len(values) % 7
        if index in (3, 4):
            match = flag_pattern.match(text, pos)
        else:
            match = arc_number_pattern.match(text, pos)
        if not match:
            break
        values.append(float(match.group(1)))
        pos = match.end()
    return values

def subdivide_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                           tolerance: float = 0.5) -> List[Point]:
    points = [p0]

    def midpoint(a, b):
        return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux + uy * uy, vx * vx + vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        if depth > 10 or flatness(p0, p1, p2, p3) < 16 * tolerance * tolerance:
            points.append(p3)
            return

        m01 = midpoint(p0, p1)
        m12 = midpoint(p1, p2)
        m23 = midpoint(p2, p3)
        m012 = midpoint(m01, m12)
        m123 = midpoint(m12, m23)
        m0123 = midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points

def subdivide_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                               tolerance: float = 0.5) -> List[Point]:
    # elevate to a cubic, the flatness test above covers both
    c1 = (p0[0] + 2.0 / 3.0 * (p1[0] - p0[0]), p0[1] + 2.0 / 3.0 * (p1[1] - p0[1]))
    c2 = (p2[0] + 2.0 / 3.0 * (p1[0] - p2[0]), p2[1] + 2.0 / 3.0 * (p1[1] - p2[1]))
    return subdivide_cubic_bezier(p0, c1, c2, p2, tolerance)

class PathBuilder:
    def __init__(self, scale: float = 1.0):
        # pixels per user unit, sets how finely curves are flattened
        self.scale = scale if scale > 0 else 1.0
        self.subpaths: List[List[Point]] = []
        self.closed: List[bool] = []
        self.current: Point = (0.0, 0.0)
        self.start: Point = (0.0, 0.0)
        self.last_cubic: Optional[Point] = None
        self.last_quad: Optional[Point] = None

    def move_to(self, point: Point):
        self.subpaths.append([point])
        self.closed.append(False)
        self.current = point
        self.start = point

    def extend(self, points: List[Point], end: Point):
        if not self.subpaths:
            self.move_to(self.current)
        self.subpaths[-1].extend(points)
        self.current = end

    def close(self):
        if self.subpaths:
            self.closed[-1] = True
            self.subpaths[-1].append(self.start)
        self.current = self.start
        # drawing after Z starts a new subpath at the same point
        self.subpaths.append([self.start])
        self.closed.append(False)

    def result(self) -> List[Tuple[List[Point], bool]]:
        return [(points, closed) for points, closed in zip(self.subpaths, self.closed)
                if len(points) > 1]

def parse_path(path_str: str, scale: float = 1.0) -> List[Tuple[List[Point], bool]]:
    """Flatten SVG path data into ``(points, closed)`` subpaths.

    ``scale`` is the number of output pixels per path unit; curves are
    subdivided finely enough for that resolution.
    """
    if not path_str:
        return []

    builder = PathBuilder(scale)
    parts = command_pattern.split(path_str)

    for i in range(1, len(parts), 2):
        cmd = parts[i]
        args = parse_path_arguments(cmd, parts[i + 1])
        if cmd in 'Zz':
            builder.close()
            builder.last_cubic = builder.last_quad = None
            continue

        count = ARGUMENT_COUNTS[cmd.upper()]
        for j in range(0, len(args) - count + 1, count):
            _apply_command(builder, cmd, args[j:j + count])
            if cmd in 'Mm':
                # extra coordinate pairs after a moveto are implicit linetos
                cmd = 'l' if cmd == 'm' else 'L'

    return builder.result()

def _apply_command(builder: PathBuilder, cmd: str, args: List[float]):
    relative = cmd.islower()
    cmd = cmd.upper()
    cx, cy = builder.current

    def absolute(x, y):
        return (cx + x, cy + y) if relative else (x, y)

    if cmd == 'M':
        builder.move_to(absolute(args[0], args[1]))
        builder.last_cubic = builder.last_quad = None
        return

    if cmd in 'LHV':
        if cmd == 'L':
            end = absolute(args[0], args[1])
        elif cmd == 'H':
            end = (cx + args[0] if relative else args[0], cy)
        else:
            end = (cx, cy + args[0] if relative else args[0])
        builder.extend([end], end)
        builder.last_cubic = builder.last_quad = None

    elif cmd in 'CS':
        if cmd == 'C':
            cp1 = absolute(args[0], args[1])
            rest = args[2:]
        else:
            cp1 = (2 * cx - builder.last_cubic[0], 2 * cy - builder.last_cubic[1]) \
                if builder.last_cubic else (cx, cy)
            rest = args
        cp2 = absolute(rest[0], rest[1])
        end = absolute(rest[2], rest[3])
        builder.extend(subdivide_cubic_bezier((cx, cy), cp1, cp2, end, 0.5 / builder.scale)[1:], end)
        builder.last_cubic = cp2
        builder.last_quad = None

    elif cmd in 'QT':
        if cmd == 'Q':
            cp = absolute(args[0], args[1])
            end = absolute(args[2], args[3])
        else:
            cp = (2 * cx - builder.last_quad[0], 2 * cy - builder.last_quad[1]) \
                if builder.last_quad else (cx, cy)
            end = absolute(args[0], args[1])
        builder.extend(subdivide_quadratic_bezier((cx, cy), cp, end, 0.5 / builder.scale)[1:], end)
        builder.last_quad = cp
        builder.last_cubic = None

    elif cmd == 'A':
        end = absolute(args[5], args[6])
        arc = approximate_scaled((cx, cy), end, bool(args[3]), bool(args[4]),
                                 args[0], args[1], math.radians(args[2]), builder.scale)
        builder.extend(arc[1:], end)
        builder.last_cubic = builder.last_quad = None
