"""WordPress reconciliation core driven through wp-cli.

Submodules:
- cli: connection profile, argument builder, command runner
- status: activation parsers for wp-cli status text
- diagnostics: failures and the Result/Diagnostics handed to the host
- plugins, themes, options, users: one reconciler per resource kind
- provider: profile configuration and reconciler registry
"""

# Intentionally minimal; logic lives in submodules and __main__.
