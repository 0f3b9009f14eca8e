r"""
Save and load EOS objects as ``.npz`` archives.

The archive holds the output of the implementation's ``state_dict``: spline
knots as arrays and scalar parameters as zero-dimensional arrays, together
with a ``kind`` entry used to find the implementation class on loading.
Loading rebuilds the interpolants from the stored knots, so that a reloaded
EOS evaluates bit-identically to the saved one.
"""

import os
from typing import Any, Union

import numpy as np

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.base import EOSBarotropicImpl, EOSThermalImpl
from jesterEOS.eos.thermal import EOSThermal
from jesterEOS.errors import EOSError
from jesterEOS.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]

#: Entry distinguishing barotropic from thermal archives
FAMILY_KEY = "eos_family"


def _save(path: PathLike, family: str, data: dict[str, Any]) -> None:
    if FAMILY_KEY in data:
        raise EOSError(f"State dict must not use reserved key '{FAMILY_KEY}'")
    np.savez(path, **{FAMILY_KEY: family}, **data)
    logger.debug(f"Saved {family} EOS of kind '{data['kind']}' to {path}")


def _load(path: PathLike, family: str) -> dict[str, Any]:
    if not os.path.exists(path):
        raise ValueError(f"EOS file not found: {path}")
    with np.load(path, allow_pickle=False) as raw:
        data = {name: raw[name] for name in raw.files}
    stored = str(data.pop(FAMILY_KEY, ""))
    if stored != family:
        raise EOSError(f"{path} does not contain a {family} EOS (found '{stored}')")
    return data


def save_eos_barotr(eos: EOSBarotropic, path: PathLike) -> None:
    """
    Save a barotropic EOS.

    Raises:
        UninitializedEOSError: If ``eos`` is default-constructed.
        NotImplementedError: If the implementation does not support saving.
    """
    _save(path, "barotropic", eos.implementation.state_dict())


def load_eos_barotr(path: PathLike) -> EOSBarotropic:
    """Load a barotropic EOS saved with :func:`save_eos_barotr`."""
    data = _load(path, "barotropic")
    return EOSBarotropic(EOSBarotropicImpl.from_state_dict(data))


def save_eos_thermal(eos: EOSThermal, path: PathLike) -> None:
    """Save a thermal EOS, including the cold EOS it is built on."""
    _save(path, "thermal", eos.implementation.state_dict())


def load_eos_thermal(path: PathLike) -> EOSThermal:
    """Load a thermal EOS saved with :func:`save_eos_thermal`."""
    data = _load(path, "thermal")
    return EOSThermal(EOSThermalImpl.from_state_dict(data))
