from .asserts import (
    assert_true_soon as assert_true_soon,
    assert_equal_soon as assert_equal_soon,
)
