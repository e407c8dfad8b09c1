"""Provisioning library behind the ``phpbuild`` command.

Operations receive a :class:`phpbuild.lib.context.BuildContext` and raise
:class:`phpbuild.lib.errors.ProvisionError` subclasses on failure.
"""
