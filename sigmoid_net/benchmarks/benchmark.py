import numpy as np
import time
import matplotlib.pyplot as plt
import os
import pandas as pd
from tabulate import tabulate

from sigmoid_net.activation import Sigmoid
from sigmoid_net.net_layer import NetLayer
from sigmoid_net.net_layer_cuda import NetLayerCUDA
from sigmoid_net.random_generator import RandomGenerator
from sigmoid_net.cuda_utils import CUDA_AVAILABLE

def generate_random_data(size, min_val=-1.0, max_val=1.0, rng=None):
    """Generate random data.

    Args:
        size (int or tuple): Size of the array to generate
        min_val (float): Minimum value of the random data
        max_val (float): Maximum value of the random data
        rng (numpy.random.Generator, optional): Source of randomness

    Returns:
        numpy.ndarray: Random data
    """
    if rng is None:
        rng = np.random.default_rng()
    return min_val + (max_val - min_val) * rng.random(size)

def jacobian_gradients(layer, x, u):
    """Gradients computed with the dense diagonal Jacobian D = diag(σ'(z)).

    Reference formulation: dL/dA = D u x^T, dL/db = D u, dL/dx = (u^T D A)^T.
    """
    D = Sigmoid.derivative(layer.linear(x))
    grad_b = D @ u
    grad_a = np.outer(grad_b, x)
    grad_x = (u @ D @ layer.weights).T
    return grad_a, grad_b, grad_x

def _time_runs(fn, num_runs):
    times = []
    for _ in range(num_runs):
        start_time = time.time()
        out = fn()
        times.append(time.time() - start_time)
    return np.mean(times), out

def benchmark_net_layer(input_size, output_size, num_runs=5, seed=None):
    """Benchmark NetLayer implementations.

    Args:
        input_size (int): Size of the input vector
        output_size (int): Size of the output vector
        num_runs (int): Number of runs to average over
        seed (int, optional): Seed of the parameter generator

    Returns:
        dict: Dictionary of benchmark results
    """
    # Initialize layer
    generator = RandomGenerator(seed)
    cpu_layer = NetLayer(output_size, input_size, generator)

    # Generate random input data
    rng = np.random.default_rng(generator.seed)
    x = generate_random_data(input_size, rng=rng)
    u = generate_random_data(output_size, rng=rng)

    # Benchmark CPU forward pass, Hadamard and Jacobian backward passes
    cpu_predict_time, _ = _time_runs(lambda: cpu_layer.predict(x), num_runs)
    cpu_grad_time, cpu_grads = _time_runs(lambda: cpu_layer.gradients(x, u), num_runs)
    jac_grad_time, jac_grads = _time_runs(lambda: jacobian_gradients(cpu_layer, x, u), num_runs)

    # Both formulations must produce the same gradients
    max_diff_jac = max(np.max(np.abs(a - b)) for a, b in zip(cpu_grads, jac_grads))
    print(f"Maximum difference between Hadamard and Jacobian gradients: {max_diff_jac:.8f}")

    # Check if CUDA is available
    gpu_predict_time = float('nan')
    gpu_grad_time = float('nan')
    if CUDA_AVAILABLE:
        # Initialize CUDA layer with the same parameters
        gpu_layer = NetLayerCUDA.from_parameters(cpu_layer.weights, cpu_layer.bias)

        gpu_predict_time, gpu_out = _time_runs(lambda: gpu_layer.predict(x), num_runs)
        gpu_grad_time, gpu_grads = _time_runs(lambda: gpu_layer.gradients(x, u), num_runs)

        # Check correctness
        max_diff_predict = np.max(np.abs(cpu_layer.predict(x) - gpu_out))
        max_diff_grad = max(np.max(np.abs(a - b)) for a, b in zip(cpu_grads, gpu_grads))
        print(f"Maximum difference between CPU and GPU (predict): {max_diff_predict:.8f}")
        print(f"Maximum difference between CPU and GPU (gradients): {max_diff_grad:.8f}")

    # Calculate speedups
    hadamard_speedup = jac_grad_time / cpu_grad_time if cpu_grad_time > 0 else float('nan')
    gpu_grad_speedup = cpu_grad_time / gpu_grad_time if CUDA_AVAILABLE and gpu_grad_time > 0 else float('nan')

    # Print results
    print(f"\n--- NetLayer Benchmark Results ---")
    print(f"Parameters: input_size={input_size}, output_size={output_size}")
    print(f"CPU Predict Time: {cpu_predict_time:.6f} seconds")
    print(f"CPU Gradients (Hadamard) Time: {cpu_grad_time:.6f} seconds (Speedup over Jacobian: {hadamard_speedup:.2f}x)")
    print(f"CPU Gradients (Jacobian) Time: {jac_grad_time:.6f} seconds")
    if CUDA_AVAILABLE:
        print(f"GPU Predict Time: {gpu_predict_time:.6f} seconds")
        print(f"GPU Gradients Time: {gpu_grad_time:.6f} seconds (Speedup: {gpu_grad_speedup:.2f}x)")

    # Return results
    return {
        "model": "NetLayer",
        "input_size": input_size,
        "output_size": output_size,
        "cpu_predict_time": cpu_predict_time,
        "cpu_hadamard_time": cpu_grad_time,
        "cpu_jacobian_time": jac_grad_time,
        "gpu_predict_time": gpu_predict_time,
        "gpu_gradients_time": gpu_grad_time,
        "hadamard_speedup": hadamard_speedup,
        "gpu_gradients_speedup": gpu_grad_speedup,
        "max_diff_jacobian": max_diff_jac
    }

def plot_benchmark_results(results, output_dir="plots"):
    """Plot benchmark results.

    Args:
        results (list): List of benchmark result dictionaries
        output_dir (str): Directory to save plots to

    Returns:
        list: Paths of the saved figures
    """
    # Create output directory if it doesn't exist
    os.makedirs(output_dir, exist_ok=True)

    # Convert results to DataFrame
    df = pd.DataFrame(results).sort_values("output_size")
    paths = []

    # Plot execution time vs layer size
    plt.figure(figsize=(10, 6))
    plt.plot(df["output_size"], df["cpu_predict_time"], "o-", label="CPU Predict")
    plt.plot(df["output_size"], df["cpu_hadamard_time"], "o-", label="CPU Gradients (Hadamard)")
    plt.plot(df["output_size"], df["cpu_jacobian_time"], "o-", label="CPU Gradients (Jacobian)")
    if CUDA_AVAILABLE:
        plt.plot(df["output_size"], df["gpu_predict_time"], "o-", label="GPU Predict")
        plt.plot(df["output_size"], df["gpu_gradients_time"], "o-", label="GPU Gradients")
    plt.xlabel("Output Size")
    plt.ylabel("Execution Time (s)")
    plt.title("NetLayer Execution Time vs Layer Size")
    plt.legend()
    plt.grid(True)
    paths.append(os.path.join(output_dir, "net_layer_time_vs_size.png"))
    plt.savefig(paths[-1])
    plt.close()

    # Plot speedup vs layer size
    plt.figure(figsize=(10, 6))
    plt.plot(df["output_size"], df["hadamard_speedup"], "o-", label="Hadamard over Jacobian")
    if CUDA_AVAILABLE:
        plt.plot(df["output_size"], df["gpu_gradients_speedup"], "o-", label="GPU Gradients")
    plt.xlabel("Output Size")
    plt.ylabel("Speedup (x)")
    plt.title("NetLayer Speedup vs Layer Size")
    plt.legend()
    plt.grid(True)
    paths.append(os.path.join(output_dir, "net_layer_speedup_vs_size.png"))
    plt.savefig(paths[-1])
    plt.close()

    return paths

def _fmt(value, format_spec, suffix=""):
    return "N/A" if np.isnan(value) else format(value, format_spec) + suffix

def format_results_table(results):
    """Render benchmark results as a tabulate grid."""
    headers = ["Input", "Output", "CPU Predict (s)", "Hadamard (s)", "Jacobian (s)",
               "GPU Predict (s)", "GPU Grad (s)", "Hadamard Speedup", "GPU Speedup"]
    table_data = []

    for result in results:
        table_data.append([
            result["input_size"],
            result["output_size"],
            f"{result['cpu_predict_time']:.6f}",
            f"{result['cpu_hadamard_time']:.6f}",
            f"{result['cpu_jacobian_time']:.6f}",
            _fmt(result['gpu_predict_time'], ".6f"),
            _fmt(result['gpu_gradients_time'], ".6f"),
            _fmt(result['hadamard_speedup'], ".2f", "x"),
            _fmt(result['gpu_gradients_speedup'], ".2f", "x")
        ])

    return tabulate(table_data, headers=headers, tablefmt="grid", disable_numparse=True)

def run_benchmarks(sizes=None, num_runs=3, output_dir="plots", results_path="benchmark_results.txt"):
    """Run benchmarks for different layer sizes.

    Args:
        sizes (list, optional): (input_size, output_size) pairs to benchmark
        num_runs (int): Number of runs to average over
        output_dir (str): Directory to save plots to
        results_path (str): File the results table is written to

    Returns:
        list: List of benchmark result dictionaries
    """
    if sizes is None:
        sizes = [(64, 64), (128, 256), (256, 512), (512, 1024), (1024, 2048)]

    # Run benchmarks
    results = []

    for input_size, output_size in sizes:
        print(f"\nRunning benchmarks for layer {output_size}x{input_size}...")
        results.append(benchmark_net_layer(input_size, output_size, num_runs))

    # Plot results
    plot_benchmark_results(results, output_dir)

    # Create a table of results
    table = format_results_table(results)
    print("\n--- Benchmark Results Summary ---")
    print(table)

    # Save table to file
    with open(results_path, "w") as f:
        f.write(table)

    return results

if __name__ == "__main__":
    run_benchmarks()
