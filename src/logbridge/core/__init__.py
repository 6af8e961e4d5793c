"""Core building blocks shared by the bootstrap and plugin layers."""
