"""Package boundary for setup orchestration and console output.

Contains the orchestrator that sequences the provisioning steps, the
status table renderer, localisation, the Rich console helpers and the
command-line entrypoint. Provisioning logic itself lives in
:mod:`devenv.provision`.
"""
