# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Passport: user registration, password sign-in and bearer session tokens."""

__version__ = "0.1.0"
