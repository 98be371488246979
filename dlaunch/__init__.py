"""Docker Launcher.

Dashboard for the containers of one Docker host:
 - inventory of containers, grouped by network and decorated with subnets
 - launch links through a reverse proxy route policy (Pomerium style)
 - user-declared custom entries for services Docker does not know about
 - start / stop / restart, and start-on-launch for stopped containers
"""
