"""Core data model: landmarks, options, meshes, math kernels and errors."""
