from __future__ import annotations
import math
import re
from geometry import parse_number_list

transform_pattern = re.compile(
    r'(matrix|translate|rotate|scale|skewX|skewY)\s*\(([^)]*)\)',
    re.IGNORECASE
)

class TransformMatrix:
    def __init__(self, a: float = 1.0, b: float = 0.0, c: float = 0.0,
                 d: float = 1.0, e: float = 0.0, f: float = 0.0):
        self.a = a
        self.b = b
        self.c = c
        self.d = d
        self.e = e
        self.f = f

    @staticmethod
    def identity() -> 'TransformMatrix':
        return TransformMatrix()

    @staticmethod
    def translate(tx: float, ty: float = 0.0) -> 'TransformMatrix':
        return TransformMatrix(1.0, 0.0, 0.0, 1.0, tx, ty)

    @staticmethod
    def scale(sx: float, sy: float = None) -> 'TransformMatrix':
        if sy is None:
            sy = sx
        return TransformMatrix(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @staticmethod
    def rotate(angle_degrees: float, cx: float = 0.0, cy: float = 0.0) -> 'TransformMatrix':
        angle_rad = math.radians(angle_degrees)
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        rotation = TransformMatrix(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)

        if cx == 0.0 and cy == 0.0:
            return rotation
        return (TransformMatrix.translate(cx, cy)
                .multiply(rotation)
                .multiply(TransformMatrix.translate(-cx, -cy)))

    def multiply(self, other: 'TransformMatrix') -> 'TransformMatrix':
        return TransformMatrix(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.e + self.c * other.f + self.e,
            self.b * other.e + self.d * other.f + self.f
        )

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e,
                self.b * x + self.d * y + self.f)

    def scale_factor(self) -> float:
        # uniform length scale, exact for similarity transforms
        return math.sqrt(abs(self.a * self.d - self.b * self.c))

    def is_identity(self) -> bool:
        return (abs(self.a - 1.0) < 1e-6 and abs(self.b) < 1e-6 and
                abs(self.c) < 1e-6 and abs(self.d - 1.0) < 1e-6 and
                abs(self.e) < 1e-6 and abs(self.f) < 1e-6)

    def __repr__(self) -> str:
        return f"TransformMatrix({self.a}, {self.b}, {self.c}, {self.d}, {self.e}, {self.f})"

def parse_transform(transform_str: str) -> TransformMatrix:
    result = TransformMatrix.identity()
    if not transform_str:
        return result

    for func_name, params_str in transform_pattern.findall(transform_str):
        params = parse_number_list(params_str)
        func_name = func_name.lower()

        if func_name == 'matrix':
            if len(params) < 6:
                continue
            step = TransformMatrix(*params[:6])
        elif func_name == 'translate':
            step = TransformMatrix.translate(params[0] if params else 0.0,
                                             params[1] if len(params) > 1 else 0.0)
        elif func_name == 'rotate':
            angle = params[0] if params else 0.0
            cx = params[1] if len(params) > 2 else 0.0
            cy = params[2] if len(params) > 2 else 0.0
            step = TransformMatrix.rotate(angle, cx, cy)
        elif func_name == 'scale':
            sx = params[0] if params else 1.0
            step = TransformMatrix.scale(sx, params[1] if len(params) > 1 else sx)
        elif func_name == 'skewx':
            tan_a = math.tan(math.radians(params[0] if params else 0.0))
            step = TransformMatrix(1.0, 0.0, tan_a, 1.0, 0.0, 0.0)
        else:
            tan_a = math.tan(math.radians(params[0] if params else 0.0))
            step = TransformMatrix(1.0, tan_a, 0.0, 1.0, 0.0, 0.0)

        result = result.multiply(step)

    return result
