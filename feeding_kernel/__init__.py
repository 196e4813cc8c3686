"""Maximum-likelihood inference of bounded feeding kernels from predator/prey mass ratios."""

__version__ = "0.1.0"
