from cadCAD.configuration.utils import config_sim

from credit_model.sys_params import sys_params


def generate_sim_config(steps_number: int, parameters: dict = None, runs: int = 1):
    return config_sim(
        {
            'N': runs,  # number of monte carlo runs
            'T': range(steps_number),  # one timestep per action
            'M': parameters or sys_params,  # simulation parameters
        }
    )
