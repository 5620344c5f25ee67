"""Simulated Arm CMSDK UART: register flags, errors, and basic, mutex and buffered drivers."""