from gha_pin.cli import cli

cli(prog_name="gha-pin")
