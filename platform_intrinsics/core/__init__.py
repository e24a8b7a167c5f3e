"""
platform_intrinsics.core: values and rules shared by every stage.

Modules:
  - types: Void/Number/Pointer/Vector/Aggregate
  - modifiers: modifier algebra over types
  - errors: error kinds (all fatal)
  - diagnostics: driver-facing diagnostic records
"""

__all__ = [
    "types",
    "modifiers",
    "errors",
    "diagnostics",
]
