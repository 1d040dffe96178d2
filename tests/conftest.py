from __future__ import annotations

import pytest

from tests._fixtures.resources import resource


@pytest.fixture
def small_resource() -> str:
    """A resource where `deref_mut` implies `deref` and `option` stands alone."""
    return resource(
        """
        deref:
        deref_mut: deref
        option:
        """,
        """
        pub mod ops {
            // region:deref
            pub trait Deref {}
            // region:deref_mut
            pub trait DerefMut: Deref {}
            // endregion:deref_mut
            // endregion:deref
        }
        // region:option
        pub enum Option<T> { None, Some(T) }
        // endregion:option
        pub use ops::Deref; // :deref
        pub struct Always;
        """,
    )
