from dataclasses import dataclass
import math


@dataclass(frozen=True, slots=True)
class VectorFloat:
    x: float
    y: float
    def __mul__(self, k: float) -> "VectorFloat": return VectorFloat(self.x * k, self.y * k)
    def dot(self, o: "VectorFloat") -> float: return self.x * o.x + self.y * o.y
    def square_length(self) -> float: return self.x * self.x + self.y * self.y
    def __abs__(self) -> float: return math.hypot(self.x, self.y)
