"""FaceTheme: landmark-driven face meshes and themed procedural styling."""

__version__ = "0.1.0"
