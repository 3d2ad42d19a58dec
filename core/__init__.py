"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/__init__.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Core logic package for DokuMini. Contains the embedded store,
                accounts, document repository and aggregation modules.
------------------------------------------------------------------------------
"""
