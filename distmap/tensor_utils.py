"""
Conversion helpers between torch tensors and numpy arrays.

The transform itself runs on numpy arrays; these helpers let callers hand in
torch tensors and get tensors back on the same device.
"""

from typing import Union

import numpy as np
import torch
import logging

logger = logging.getLogger(__name__)


ArrayLike = Union[np.ndarray, torch.Tensor]


def to_numpy(volume: ArrayLike) -> np.ndarray:
    """
    Get a numpy view (or copy for device tensors) of a volume.

    Args:
        volume: numpy array or torch tensor

    Returns:
        numpy array with the same shape and values
    """
    if isinstance(volume, torch.Tensor):
        if volume.requires_grad:
            volume = volume.detach()
        if volume.device.type != "cpu":
            logger.debug(f"Copying tensor from {volume.device} to host")
            volume = volume.cpu()
        return volume.numpy()
    if isinstance(volume, np.ndarray):
        return volume
    raise TypeError(f"Expected numpy.ndarray or torch.Tensor, got {type(volume)}")


def like_input(result: np.ndarray, reference: ArrayLike) -> ArrayLike:
    """
    Return `result` as the same kind of object as `reference`.

    Args:
        result: Computed numpy array
        reference: The object the caller passed in

    Returns:
        `result` unchanged for numpy input, a tensor on the reference device otherwise
    """
    if isinstance(reference, torch.Tensor):
        return torch.from_numpy(result).to(reference.device)
    return result
