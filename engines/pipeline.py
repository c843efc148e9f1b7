"""Operation dispatch: validated params in, timed OperationResult out."""

import logging
from typing import Union

from models.operation_params import AlignParams, DenoiseParams, DownsampleParams
from models.operation_result import OperationResult
from models.pixel_buffer import PixelBuffer, check_buffer
from engines.block_averager import align_pixels, downsample
from engines.denoiser import denoise
from utils.metrics import Timer

logger = logging.getLogger(__name__)

OperationParams = Union[AlignParams, DenoiseParams, DownsampleParams]


def operation_name(params: OperationParams) -> str:
    if isinstance(params, AlignParams):
        return 'align'
    if isinstance(params, DenoiseParams):
        return 'denoise'
    if isinstance(params, DownsampleParams):
        return 'downsample'
    raise TypeError(f"Unknown operation parameters: {type(params).__name__}")


def run_operation(buffer: PixelBuffer, params: OperationParams) -> OperationResult:
    """Run one pixel operation on an immutable buffer. Safe off the GUI thread."""
    check_buffer(buffer)
    name = operation_name(params)
    timer = Timer()
    
    if name == 'align':
        output = timer.measure(align_pixels, buffer, params.block_size)
    elif name == 'denoise':
        output = timer.measure(denoise, buffer, params.strength, params.tolerance, params.max_colors)
    else:
        output = timer.measure(downsample, buffer, params.cols, params.rows)
    
    logger.info("%s finished in %.1fms (%dx%d -> %dx%d)", params.label, timer.elapsed_ms,
                buffer.width, buffer.height, output.width, output.height)
    
    return OperationResult(
        operation=name,
        buffer=output,
        label=params.label,
        input_size=buffer.size,
        params=params,
        elapsed_ms=timer.elapsed_ms,
    )
