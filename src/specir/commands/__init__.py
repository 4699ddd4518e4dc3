"""Built-in CLI sub-commands for specir.

Each module exports one command callback registered on the root app in
:mod:`specir.app`:

* :mod:`~specir.commands.validate` -- validate a document and report issues.
* :mod:`~specir.commands.analyze` -- infer the entity relationship graph.
* :mod:`~specir.commands.typemap` -- show the DTO type mappings.
* :mod:`~specir.commands.naming` -- classify operationIds.
* :mod:`~specir.commands.plan` -- lay out generated artifacts on disk.
"""
