import numpy as np
from numba import cuda
from .net_layer import NetLayer, LayerGradients
from .cuda_utils import (
    CUDA_AVAILABLE, get_optimal_grid_block_size, get_grid_block_size_2d,
    linear_sigmoid_forward_kernel, sigmoid_backward_kernel,
    outer_product_kernel, transpose_matvec_kernel
)

class NetLayerCUDA(NetLayer):
    """CUDA-accelerated fully connected sigmoid layer.

    Same contract as NetLayer: y = σ(Ax + b) with the three backpropagation
    gradients. Parameters are mirrored on the device as float32, so results
    agree with the CPU layer to single precision. Without CUDA every method
    falls back to the CPU implementation.
    """

    def _set_parameters(self, weights, bias):
        super()._set_parameters(weights, bias)

        # Check if CUDA is available
        self.cuda_available = CUDA_AVAILABLE

        # Pre-allocate device memory for weights and biases if CUDA is available
        if self.cuda_available:
            self.stream = cuda.stream()
            self.d_weights = cuda.to_device(self.weights.astype(np.float32), stream=self.stream)
            self.d_bias = cuda.to_device(self.bias.astype(np.float32), stream=self.stream)
            self.stream.synchronize()

    def _to_device(self, v):
        return cuda.to_device(v.astype(np.float32), stream=self.stream)

    def _delta_device(self, d_x, d_u):
        d_delta = cuda.device_array(self.output_size, dtype=np.float32, stream=self.stream)
        grid_size, block_size = get_optimal_grid_block_size(self.output_size)
        sigmoid_backward_kernel[(grid_size,), (block_size,), self.stream](
            self.d_weights, self.d_bias, d_x, d_u, d_delta,
            self.input_size, self.output_size
        )
        return d_delta

    def _grad_a_device(self, d_delta, d_x):
        d_grad_a = cuda.device_array((self.output_size, self.input_size), dtype=np.float32,
                                     stream=self.stream)
        grid, block = get_grid_block_size_2d(self.output_size, self.input_size)
        outer_product_kernel[grid, block, self.stream](
            d_delta, d_x, d_grad_a, self.output_size, self.input_size
        )
        return d_grad_a

    def _grad_x_device(self, d_delta):
        d_grad_x = cuda.device_array(self.input_size, dtype=np.float32, stream=self.stream)
        grid_size, block_size = get_optimal_grid_block_size(self.input_size)
        transpose_matvec_kernel[(grid_size,), (block_size,), self.stream](
            self.d_weights, d_delta, d_grad_x, self.input_size, self.output_size
        )
        return d_grad_x

    def _copy_to_host(self, d_array):
        out = d_array.copy_to_host(stream=self.stream)
        self.stream.synchronize()
        return out

    def predict(self, x):
        """Forward pass y = σ(Ax + b) using CUDA.

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)

        Returns:
            numpy.ndarray: Output vector of shape (output_size,)
        """
        x = self._check_input(x)
        if not self.cuda_available:
            # Fallback to CPU implementation if CUDA is not available
            return super().predict(x)

        d_x = self._to_device(x)
        d_out = cuda.device_array(self.output_size, dtype=np.float32, stream=self.stream)
        grid_size, block_size = get_optimal_grid_block_size(self.output_size)
        linear_sigmoid_forward_kernel[(grid_size,), (block_size,), self.stream](
            self.d_weights, self.d_bias, d_x, d_out, self.input_size, self.output_size
        )
        return self._copy_to_host(d_out)

    def grad_a(self, x, u):
        x = self._check_input(x)
        u = self._check_upstream(u)
        if not self.cuda_available:
            return super().grad_a(x, u)

        d_x = self._to_device(x)
        d_delta = self._delta_device(d_x, self._to_device(u))
        return self._copy_to_host(self._grad_a_device(d_delta, d_x))

    def grad_b(self, x, u):
        x = self._check_input(x)
        u = self._check_upstream(u)
        if not self.cuda_available:
            return super().grad_b(x, u)

        d_delta = self._delta_device(self._to_device(x), self._to_device(u))
        return self._copy_to_host(d_delta)

    def grad_x(self, x, u):
        x = self._check_input(x)
        u = self._check_upstream(u)
        if not self.cuda_available:
            return super().grad_x(x, u)

        d_delta = self._delta_device(self._to_device(x), self._to_device(u))
        return self._copy_to_host(self._grad_x_device(d_delta))

    def gradients(self, x, u):
        """All three gradients from a single kernel pass over delta = σ'(z) ⊙ u."""
        x = self._check_input(x)
        u = self._check_upstream(u)
        if not self.cuda_available:
            return super().gradients(x, u)

        d_x = self._to_device(x)
        d_delta = self._delta_device(d_x, self._to_device(u))
        d_grad_a = self._grad_a_device(d_delta, d_x)
        d_grad_x = self._grad_x_device(d_delta)
        return LayerGradients(
            grad_a=self._copy_to_host(d_grad_a),
            grad_b=self._copy_to_host(d_delta),
            grad_x=self._copy_to_host(d_grad_x),
        )
