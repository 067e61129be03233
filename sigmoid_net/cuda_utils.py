import numpy as np
from numba import cuda
import math

# Check if CUDA is available
CUDA_AVAILABLE = cuda.is_available()

# Define constants for thread block sizes
THREAD_BLOCK_SIZE = 256
WARP_SIZE = 32
MAX_THREADS_PER_BLOCK = 1024

# Helper function to get optimal grid and block sizes
def get_optimal_grid_block_size(size, max_threads_per_block=MAX_THREADS_PER_BLOCK):
    """Get optimal grid and block size for better GPU occupancy."""
    block_size = min(max_threads_per_block, size)
    # Make block size a multiple of warp size for better performance
    block_size = (block_size + WARP_SIZE - 1) // WARP_SIZE * WARP_SIZE
    grid_size = (size + block_size - 1) // block_size
    return grid_size, block_size

def get_grid_block_size_2d(rows, cols, block_side=16):
    """Grid and block size for kernels indexed by (row, column)."""
    grid = ((rows + block_side - 1) // block_side, (cols + block_side - 1) // block_side)
    return grid, (block_side, block_side)

@cuda.jit(device=True)
def sigmoid_device(z):
    """Sigmoid evaluated through exp(-|z|) so it never overflows."""
    e = math.exp(-abs(z))
    if z >= 0:
        return 1.0 / (1.0 + e)
    return e / (1.0 + e)

@cuda.jit(device=True)
def sigmoid_derivative_device(z):
    """σ'(z) = exp(-|z|) / (1 + exp(-|z|))^2."""
    e = math.exp(-abs(z))
    return e / ((1.0 + e) * (1.0 + e))

@cuda.jit
def linear_sigmoid_forward_kernel(weights, bias, x, out, input_size, output_size):
    """CUDA kernel for the layer forward pass: out = σ(weights * x + bias).

    Args:
        weights: Weight matrix of shape (output_size, input_size)
        bias: Bias vector of shape (output_size,)
        x: Input vector of shape (input_size,)
        out: Output vector of shape (output_size,)
        input_size: Size of input vector
        output_size: Size of output vector
    """
    idx = cuda.grid(1)

    if idx < output_size:
        z = bias[idx]
        for i in range(input_size):
            z += weights[idx, i] * x[i]
        out[idx] = sigmoid_device(z)

@cuda.jit
def sigmoid_backward_kernel(weights, bias, x, u, delta, input_size, output_size):
    """CUDA kernel for delta = σ'(weights * x + bias) ⊙ u, the bias gradient.

    Args:
        weights: Weight matrix of shape (output_size, input_size)
        bias: Bias vector of shape (output_size,)
        x: Input vector of shape (input_size,)
        u: Upstream gradient of shape (output_size,)
        delta: Output vector of shape (output_size,)
        input_size: Size of input vector
        output_size: Size of output vector
    """
    idx = cuda.grid(1)

    if idx < output_size:
        z = bias[idx]
        for i in range(input_size):
            z += weights[idx, i] * x[i]
        delta[idx] = sigmoid_derivative_device(z) * u[idx]

@cuda.jit
def outer_product_kernel(delta, x, grad_a, output_size, input_size):
    """CUDA kernel for grad_a[i, j] = delta[i] * x[j]."""
    row, col = cuda.grid(2)

    if row < output_size and col < input_size:
        grad_a[row, col] = delta[row] * x[col]

@cuda.jit
def transpose_matvec_kernel(weights, delta, grad_x, input_size, output_size):
    """CUDA kernel for grad_x = weights^T * delta.

    Each thread owns one input coordinate and walks down its weight column.
    """
    idx = cuda.grid(1)

    if idx < input_size:
        acc = 0.0
        for i in range(output_size):
            acc += weights[i, idx] * delta[i]
        grad_x[idx] = acc
