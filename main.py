import numpy as np
import argparse

from sigmoid_net.net_layer import NetLayer
from sigmoid_net.net_layer_cuda import NetLayerCUDA
from sigmoid_net.random_generator import RandomGenerator
from sigmoid_net.gradient_check import check_gradients
from sigmoid_net.cuda_utils import CUDA_AVAILABLE
from sigmoid_net.benchmarks.benchmark import run_benchmarks

def make_layer(output_size, input_size, generator, use_cuda=False):
    """Create a CPU or CUDA layer drawing its parameters from generator."""
    if use_cuda and CUDA_AVAILABLE:
        return NetLayerCUDA(output_size, input_size, generator)
    return NetLayer(output_size, input_size, generator)

def demo_net_layer(generator, use_cuda=False):
    """Demonstrate layer construction.

    Args:
        generator (RandomGenerator): Shared source of initial parameters
        use_cuda (bool): Whether to use CUDA acceleration
    """
    print("\n--- NetLayer Demo ---")

    layer1 = make_layer(30, 20, generator, use_cuda)
    print(f"Layer 1: {layer1}")
    print("Weights:")
    print(layer1.weights)

    layer2 = make_layer(25, 35, generator, use_cuda)
    print(f"\nLayer 2: {layer2}")
    print("Bias:")
    print(layer2.bias)

def demo_back_propagation(generator, use_cuda=False):
    """Demonstrate the forward pass and the backpropagation gradients.

    Args:
        generator (RandomGenerator): Shared source of initial parameters
        use_cuda (bool): Whether to use CUDA acceleration
    """
    print("\n--- Backpropagation Demo ---")

    layer = make_layer(3, 2, generator, use_cuda)
    x = np.array([-2.0, 3.0])
    u = np.array([-1.0, 2.0, 1.0])

    print(f"Input x: {x}")
    print(f"Upstream gradient u: {u}")

    print("\nPrediction:")
    print(layer.predict(x))
    print("\nGradient with respect to A:")
    print(layer.grad_a(x, u))
    print("\nGradient with respect to b:")
    print(layer.grad_b(x, u))
    print("\nGradient with respect to x:")
    print(layer.grad_x(x, u))

    # Compare with finite differences
    tolerance = 1e-3 if isinstance(layer, NetLayerCUDA) and CUDA_AVAILABLE else 1e-5
    result = check_gradients(layer, x, u, tolerance=tolerance)
    print("\nFinite-difference check:")
    for name, error in result.errors.items():
        print(f"  {name}: relative error {error:.3e}")
    print(f"  {'passed' if result.passed else 'FAILED'}")

def main():
    parser = argparse.ArgumentParser(description="Sigmoid NetLayer Demo")
    parser.add_argument("--demo", type=str, default="all", choices=["layer", "backprop", "all"],
                        help="Demo to run (layer, backprop, or all)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed of the parameter generator (default: 42)")
    parser.add_argument("--cuda", action="store_true", help="Use CUDA acceleration")
    parser.add_argument("--benchmark", action="store_true", help="Run benchmarks")
    args = parser.parse_args()

    # Print CUDA availability
    if args.cuda:
        if CUDA_AVAILABLE:
            print("CUDA is available and will be used for acceleration")
        else:
            print("CUDA is not available, falling back to CPU implementation")

    # One generator shared by every demo layer, so construction order matters
    generator = RandomGenerator(args.seed)
    print(f"Using {generator}")

    # Run demos
    if args.demo in ["layer", "all"]:
        demo_net_layer(generator, args.cuda)

    if args.demo in ["backprop", "all"]:
        demo_back_propagation(generator, args.cuda)

    # Run benchmarks
    if args.benchmark:
        run_benchmarks()

if __name__ == "__main__":
    main()
