import asyncio
import logging
import sys

from epmdlib import AsyncIOEPMDClient, AsyncIOEPMD


async def debug_epmd(name: str):
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    client, creation = await AsyncIOEPMD.register_and_keep_alive(name, 45000)
    print(f"Registered '{name}' with creation {creation}")

    try:
        async with AsyncIOEPMDClient() as lookup:
            info = await lookup.get_node(name)
            print(f"Lookup: {info}")

            for node in await lookup.get_all_nodes():
                print(f"Names: {node.name} at port {node.port}")

            for node in await lookup.dump_epmd():
                print(f"Dump: {node.name} at port {node.port}, fd = {node.fd}")
    finally:
        await client.close()


asyncio.run(debug_epmd(sys.argv[1] if len(sys.argv) > 1 else 'test'))
