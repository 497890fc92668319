from src.service.gate_client.app.interface.i_gate_api import IGateApi


__all__ = ['IGateApi']
