"""SFS image builder, boot sector signer, trap vector generator and small kernel-style libraries."""

__version__ = "0.1.0"