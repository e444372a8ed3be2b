"""
Built-in catalog — used when no envhub.yml is found.

Same shape as envhub.yml. The profiles share one tool group set and
one optimized-interpreter definition instead of repeating them per
shell.

    default        optimized CPython 3.13 (Clang, PGO + LTO) + data libs
    cpp            Clang/LLVM C/C++ toolchain
    cuda           C/C++ toolchain + CUDA toolkit
    deep-learning  GPU Python stack (PyTorch, TensorFlow) + CUDA libs
    all            everything above
    notebook       optimized CPython 3.13 (PGO + LTO) + pip, virtualenv, Jupyter
"""

from __future__ import annotations

BUILTIN_CATALOG: dict = {
    "settings": {
        "default": "default",
        "store_root": "/nix/store",
        "override_file": ".envhub-profile",
        "override_env": "ENVHUB_PROFILE",
        "probe_timeout": 5,
    },
    # ── Packages ────────────────────────────────────────────────
    "packages": {
        # No PYTHONHOME: the interpreter locates its stdlib from its own binary
        "python313": {
            "version": "3.13",
            "description": "CPython interpreter",
        },
        "pyright": {"description": "Static type checker"},
        "ruff": {"description": "Python linter"},
        "black": {"description": "Python formatter"},
        "clang-tools": {"version": "19", "description": "clangd, clang-format, clang-tidy"},
        "llvm": {"version": "19", "description": "LLVM compiler infrastructure"},
        "lldb": {"version": "19", "description": "LLVM debugger"},
        "cmake": {"description": "Build system generator"},
        "cudatoolkit": {
            "version": "12.4",
            "description": "NVIDIA CUDA toolkit (nvcc)",
            "unfree": True,
            "env": {"CUDA_PATH": "${prefix}", "CUDA_HOME": "${prefix}"},
        },
        "cudnn": {
            "version": "9.1",
            "description": "NVIDIA cuDNN",
            "unfree": True,
            "bin": "",
            "env": {"CUDNN_PATH": "${prefix}"},
        },
        "nccl": {
            "version": "2.21",
            "description": "NVIDIA collective communications library",
            "unfree": True,
            "bin": "",
        },
    },
    # ── Groups ──────────────────────────────────────────────────
    "groups": {
        "python-dev-tools": ["pyright", "ruff", "black"],
        "cpp-tools": ["clang-tools", "llvm", "lldb", "cmake"],
        "cuda-libs": ["cudatoolkit", "cudnn", "nccl"],
    },
    # ── Overlays ────────────────────────────────────────────────
    "overlays": {
        "python-optimized": {
            "target": "python313",
            "description": "Profile Guided Optimization and Link Time Optimization",
            "options": {"enableOptimizations": True, "enableLTO": True},
        },
        "python-clang": {
            "target": "python313",
            "description": "Compile CPython with the Clang standard environment",
            "options": {"stdenv": "clangStdenv"},
        },
    },
    # ── Profiles ────────────────────────────────────────────────
    "profiles": {
        "default": {
            "description": "Optimized Python (Clang build)",
            "shell_name": "python-dev",
            "interpreter": "python313",
            "python_packages": ["pandas", "numpy", "debugpy"],
            "packages": ["python313", "@python-dev-tools"],
            "overlays": ["python-optimized", "python-clang"],
            "flags": ["optimized_interpreter"],
            "diagnostics": [{"label": "Python", "tool": "python"}],
        },
        "cpp": {
            "description": "C/C++ (Clang/LLVM)",
            "shell_name": "cpp-dev",
            "packages": ["@cpp-tools"],
            "diagnostics": [{"label": "Clang", "tool": "clang"}],
        },
        "cuda": {
            "description": "CUDA C/C++",
            "shell_name": "cuda-cpp-dev",
            "packages": ["@cpp-tools", "cudatoolkit"],
            "flags": ["requires_gpu"],
            "diagnostics": [{"label": "NVCC", "tool": "nvcc"}],
        },
        "deep-learning": {
            "description": "Deep Learning (Python + CUDA)",
            "shell_name": "deep-learning-dev",
            "interpreter": "python313",
            "python_packages": ["pytorchWithCuda", "tensorflowWithCuda", "debugpy"],
            "packages": ["python313", "@python-dev-tools", "@cuda-libs"],
            "overlays": ["python-optimized", "python-clang"],
            "flags": ["requires_gpu", "optimized_interpreter"],
            "diagnostics": [{"label": "Python", "tool": "python"}],
        },
        "all": {
            "description": "Python, C/C++, CUDA and ML tools",
            "shell_name": "all-tools-dev",
            "interpreter": "python313",
            "python_packages": [
                "pandas",
                "numpy",
                "pytorchWithCuda",
                "tensorflowWithCuda",
                "debugpy",
            ],
            "packages": ["python313", "@python-dev-tools", "@cpp-tools", "@cuda-libs"],
            "overlays": ["python-optimized", "python-clang"],
            "flags": ["requires_gpu", "optimized_interpreter"],
            "diagnostics": [
                {"label": "Python", "tool": "python"},
                {"label": "Clang", "tool": "clang"},
                {"label": "NVCC", "tool": "nvcc"},
            ],
        },
        "notebook": {
            "description": "Optimized Python with pip, virtualenv and Jupyter",
            "shell_name": "python-notebook-dev",
            "interpreter": "python313",
            "python_packages": ["pip", "virtualenv", "jupyter", "pandas", "numpy"],
            "packages": ["python313"],
            "overlays": ["python-optimized"],
            "flags": ["optimized_interpreter"],
            "diagnostics": [{"label": "Python", "tool": "python"}],
        },
    },
}
