"""TCP/USB transport packets, packet reading, stream services and their registry."""