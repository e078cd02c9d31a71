#!/usr/bin/env python3
"""Generate VAPID keys for Web Push notifications."""

from pushrelay.core.vapid import main

if __name__ == "__main__":
    main()
