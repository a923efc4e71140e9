"""
Reviewproof CLI

Command-line interface for building review Merkle trees, proving
membership, persisting root hashes and simulating tampering.

Usage:
    python -m reviewproof_cli build reviews.jsonl --label electronics --store
    python -m reviewproof_cli prove reviews.jsonl --review-id A1_P1_1000000
    python -m reviewproof_cli roots check reviews.jsonl --label electronics
    python -m reviewproof_cli tamper reviews.jsonl --mode inject --count 2
"""

__version__ = "0.1.0"
