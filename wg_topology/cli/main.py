"""Main CLI application for wg-topology."""

import logging
import sys
from pathlib import Path

import click

from ..config import parse_config, preview_label, render_preview, write_config, write_configs
from ..errors import ConfigParseError, TopologyError, ValidationAggregate
from ..models import ProjectSettings, generate_seed, load_settings, save_settings
from ..models.project import DEFAULT_SEED_BITS
from ..topology import build_topology, parse_subnet, validate_request

logger = logging.getLogger(__name__)


def _report_errors(error: TopologyError):
    """Print every topology error and exit with status 1."""
    errors = error.errors if isinstance(error, ValidationAggregate) else [error]
    click.echo(f"✗ Cannot generate topology ({len(errors)} problem(s)):", err=True)
    for e in errors:
        click.echo(f"  - {e}", err=True)
    sys.exit(1)


def _load(project):
    try:
        return load_settings(Path(project))
    except FileNotFoundError as e:
        raise click.ClickException(str(e))


def _build(settings: ProjectSettings):
    try:
        return build_topology(settings.to_request())
    except TopologyError as e:
        _report_errors(e)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug):
    """wg-topology - Deterministic WireGuard configuration generator."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.option('--project', required=True, help='Path of the project file to create')
@click.option('--subnet', default='10.0.0.0/24', show_default=True, help='Virtual network CIDR')
@click.option('--clients', default=3, show_default=True, type=int, help='Number of client peers')
@click.option('--endpoint', default='remote.endpoint.net:51820', show_default=True, help='Public server host:port')
@click.option('--listen-port', default=51820, show_default=True, type=int, help='Server listen port')
@click.option('--allowed-ips', default='0.0.0.0/0, ::/0', show_default=True, help='Networks clients route through the tunnel')
@click.option('--dns', default='', help='DNS servers pushed to clients')
@click.option('--interface', default='wg0', show_default=True, help='Server interface name')
@click.option('--use-last-address', is_flag=True, help='Give the server the last usable address')
@click.option('--preshared-keys', is_flag=True, help='Add a preshared key to every pairing')
@click.option('--post-up', default='', help='Server PostUp command')
@click.option('--post-down', default='', help='Server PostDown command')
@click.option('--seed-bits', default=DEFAULT_SEED_BITS, show_default=True, type=int, help='Seed size in bits')
@click.option('--force', is_flag=True, help='Overwrite an existing project file')
def init(project, subnet, clients, endpoint, listen_port, allowed_ips, dns, interface,
         use_last_address, preshared_keys, post_up, post_down, seed_bits, force):
    """Create a new project file with a fresh seed."""
    path = Path(project)
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")

    try:
        parse_subnet(subnet)
    except TopologyError as e:
        _report_errors(e)

    try:
        seed_b64 = generate_seed(seed_bits)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--seed-bits')

    settings = ProjectSettings(
        interface=interface,
        seed=seed_b64,
        number_of_clients=clients,
        subnet=subnet,
        dns=dns,
        endpoint=endpoint,
        listen_port=listen_port,
        allowed_ips=allowed_ips,
        use_last_address=use_last_address,
        use_preshared_keys=preshared_keys,
        post_up=post_up,
        post_down=post_down,
    )
    save_settings(settings, path)

    click.echo(f"✓ Project created: {path}")
    click.echo(f"  Subnet:  {settings.subnet}")
    click.echo(f"  Clients: {settings.number_of_clients}")
    click.echo("  Keep this file private: it holds the seed for every key.")


@cli.command('set')
@click.option('--project', required=True, help='Path to the project file')
@click.option('--subnet', help='Virtual network CIDR')
@click.option('--clients', type=int, help='Number of client peers')
@click.option('--endpoint', help='Public server host:port')
@click.option('--listen-port', type=int, help='Server listen port')
@click.option('--allowed-ips', help='Networks clients route through the tunnel')
@click.option('--dns', help='DNS servers pushed to clients')
@click.option('--interface', help='Server interface name')
@click.option('--use-last-address/--use-first-address', default=None, help='Server address placement')
@click.option('--preshared-keys/--no-preshared-keys', default=None, help='Preshared key per pairing')
@click.option('--post-up', help='Server PostUp command')
@click.option('--post-down', help='Server PostDown command')
def set_(project, subnet, clients, endpoint, listen_port, allowed_ips, dns, interface,
         use_last_address, preshared_keys, post_up, post_down):
    """Change project settings. The seed is left untouched."""
    settings = _load(project)

    update = {
        "subnet": subnet,
        "number_of_clients": clients,
        "endpoint": endpoint,
        "listen_port": listen_port,
        "allowed_ips": allowed_ips,
        "dns": dns,
        "interface": interface,
        "use_last_address": use_last_address,
        "use_preshared_keys": preshared_keys,
        "post_up": post_up,
        "post_down": post_down,
    }
    updated = settings.model_copy(update={k: v for k, v in update.items() if v is not None})

    changed = settings.changed_fields(updated)
    if not changed:
        click.echo("No changes.")
        return

    try:
        errors = validate_request(updated.to_request())
    except TopologyError as e:
        errors = [e]
    if errors:
        _report_errors(ValidationAggregate(errors))

    save_settings(updated, Path(project))
    click.echo(f"✓ Project updated: {project}")
    for name in changed:
        click.echo(f"  {name}: {getattr(settings, name)!r} -> {getattr(updated, name)!r}")


@cli.command()
@click.option('--project', required=True, help='Path to the project file')
@click.option('--output', required=True, help='Directory to write configs into')
def generate(project, output):
    """Generate server.conf and peer-<id>.conf files."""
    settings = _load(project)
    graph = _build(settings)

    try:
        paths = write_configs(graph, Path(output))
    except OSError as e:
        raise click.ClickException(f"Failed to write configs: {e}")

    click.echo(f"✓ Generated {len(paths)} config(s) in {output}")
    for path in paths:
        click.echo(f"  - {path.name}")


@cli.command()
@click.option('--project', required=True, help='Path to the project file')
@click.option('--peer', 'peer_id', type=int, help='Only show the node with this id (0 = server)')
def preview(project, peer_id):
    """Print generated configs without writing files."""
    settings = _load(project)
    graph = _build(settings)

    if peer_id is not None:
        try:
            node = graph.get(peer_id)
        except KeyError as e:
            raise click.ClickException(str(e.args[0]))
        click.echo(f"=== {preview_label(node)} ===")
        click.echo(write_config(node))
        return

    for label, text in render_preview(graph).items():
        click.echo(f"=== {label} ===")
        click.echo(text)


@cli.group()
def seed():
    """Manage the project seed."""
    pass


@seed.command('regenerate')
@click.option('--project', required=True, help='Path to the project file')
@click.option('--seed-bits', default=DEFAULT_SEED_BITS, show_default=True, type=int, help='Seed size in bits')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
def seed_regenerate(project, seed_bits, yes):
    """Replace the seed. Every issued peer config must be redeployed."""
    settings = _load(project)

    if not yes:
        click.confirm(
            "Regenerating the seed is irreversible and invalidates every deployed peer. Continue?",
            abort=True
        )

    try:
        updated = settings.with_new_seed(seed_bits)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--seed-bits')

    save_settings(updated, Path(project))
    logger.info(f"Seed regenerated for {project}")
    click.echo(f"✓ Seed regenerated: {project}")
    click.echo("  Run 'generate' again and redeploy all peers.")


@cli.command()
@click.option('--project', required=True, help='Path to the project file')
def info(project):
    """Display project information."""
    settings = _load(project)

    click.echo("=== Project Information ===\n")
    click.echo(f"Interface:        {settings.interface}")
    click.echo(f"Subnet:           {settings.subnet}")
    click.echo(f"Clients:          {settings.number_of_clients}")
    click.echo(f"Endpoint:         {settings.endpoint}")
    click.echo(f"Listen Port:      {settings.listen_port}")
    click.echo(f"Allowed IPs:      {settings.allowed_ips}")
    click.echo(f"DNS:              {settings.dns or '-'}")
    click.echo(f"Server Address:   {'last' if settings.use_last_address else 'first'} usable")
    click.echo(f"Preshared Keys:   {'yes' if settings.use_preshared_keys else 'no'}")

    graph = _build(settings)
    click.echo(f"\nServer Public Key: {graph.server.keys.public_key_b64}")
    click.echo(f"\nPeers ({len(graph.clients)}):")
    for node in graph.clients:
        click.echo(f"  - {node.id}: {node.address} {node.keys.public_key_b64}")


@cli.command()
@click.argument('conf_file', type=click.Path(exists=True, dir_okay=False))
def inspect(conf_file):
    """Summarize an existing .conf file."""
    text = Path(conf_file).read_text(encoding='utf-8')
    try:
        config = parse_config(text)
    except ConfigParseError as e:
        raise click.ClickException(f"{conf_file}: {e}")

    click.echo(f"Address:    {config.interface.get('Address', '-')}")
    if 'ListenPort' in config.interface:
        click.echo(f"ListenPort: {config.interface['ListenPort']}")
    click.echo(f"\nPeers ({len(config.peers)}):")
    for peer in config.peers:
        psk = " (psk)" if peer.get('PresharedKey') else ""
        endpoint = f" via {peer['Endpoint']}" if peer.get('Endpoint') else ""
        click.echo(f"  - {peer.get('PublicKey', '?')} -> {peer.get('AllowedIPs', '-')}{endpoint}{psk}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
