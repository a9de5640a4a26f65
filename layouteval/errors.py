"""
Exceptions raised while evaluating a page.
"""


class LayoutEvalError(Exception):
    """Base class for evaluation errors."""


class InputMismatchError(LayoutEvalError, ValueError):
    """
    The evaluation inputs do not describe the same page.

    Raised when the hypothesis and groundtruth images differ in size or a
    region lies outside the image. Clamping would corrupt the pixel totals,
    so the page evaluation is refused instead.
    """
