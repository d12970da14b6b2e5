"""Shared constants and paths for FaceTheme."""

from pathlib import Path

# Package paths
PACKAGE_ROOT = Path(__file__).parent
ASSETS_DIR = PACKAGE_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
THEME_CONFIG_DIR = CONFIG_DIR / "themes"

# Landmark input requirements
MIN_LANDMARK_COUNT = 27
REQUIRED_LANDMARK_TYPES = ("eyeLeft", "eyeRight", "nose", "mouthLeft", "mouthRight")
KEY_LANDMARK_TYPES = ("eyeLeft", "eyeRight", "nose", "mouthLeft", "mouthRight", "chinBottom")

# Synthetic vertices added per mesh resolution
RESOLUTION_VERTEX_COUNTS = {
    "low": 20,
    "medium": 50,
    "high": 100,
}

# Triangle acceptance thresholds (normalised landmark units)
MIN_EDGE_LENGTH = 0.001       # Shorter edges mean coincident points
MIN_TRIANGLE_AREA = 1e-5
TRIANGLE_LOCALITY = 0.3       # Max edge length during triangulation
FACE_LOCAL_DISTANCE = 0.2     # Max pairwise distance after topology filtering
TRIANGLES_PER_VERTEX_CAP = 3

# Laplacian smoothing blend (0 = keep, 1 = neighbour average)
SMOOTHING_FACTOR = 0.5

# Optimizer
MERGE_DECIMALS = 6
MIN_ASPECT_RATIO = 0.2
DEFAULT_TARGET_QUALITY = 0.8

# Validator thresholds and weights
SYMMETRY_TOLERANCE = 0.05
WARN_ASPECT_RATIO = 0.3
WARN_SYMMETRY = 0.7
WARN_SMOOTHNESS = 0.6
IDEAL_VERTEX_TRIANGLE_RATIO = 0.5  # ~2 triangles per vertex
QUALITY_WEIGHTS = {
    "aspect_ratio": 0.30,
    "symmetry_score": 0.25,
    "smoothness_score": 0.25,
    "topology_score": 0.20,
}

# Default per-vertex normal when none can be derived
DEFAULT_NORMAL = (0.0, 0.0, 1.0)

# Inference boundary
TENSOR_SIZE = 512
TENSOR_CHANNELS = 3
STYLE_VECTOR_LENGTH = 256
STYLE_VECTOR_HEAD = 9  # named knob slots before the theme tail

# Golden ratio used by classical proportion passes
GOLDEN_RATIO = 1.618033988749

# Texture sizes
BASE_TEXTURE_SIZE = 512
HAIR_TEXTURE_SIZE = 256

# Fallback lighting analysis when the caller supplies none
DEFAULT_LIGHT_DIRECTION = (0.5, -0.3, 0.8)
DEFAULT_LIGHT_INTENSITY = 0.8
DEFAULT_LIGHT_COLOR = (1.0, 0.95, 0.9)
DEFAULT_AMBIENT_LEVEL = 0.3
