import logging
from transitions import Machine

logger = logging.getLogger(__name__)


# Define the states of one collection cycle
states = ['idle', 'collecting', 'appending', 'threshold_check', 'exporting', 'resetting']

# Define the transitions with callbacks
transitions = [
    {'trigger': 'cycle_started_event', 'source': 'idle', 'dest': 'collecting', 'before': 'on_cycle_started_event'},
    {'trigger': 'sample_collected_event', 'source': 'collecting', 'dest': 'appending', 'before': 'on_sample_collected_event'},
    {'trigger': 'sample_appended_event', 'source': 'appending', 'dest': 'threshold_check', 'before': 'on_sample_appended_event'},
    {'trigger': 'threshold_reached_event', 'source': 'threshold_check', 'dest': 'exporting', 'before': 'on_threshold_reached_event'},
    {'trigger': 'threshold_not_reached_event', 'source': 'threshold_check', 'dest': 'idle', 'before': 'on_threshold_not_reached_event'},
    {'trigger': 'export_finished_event', 'source': 'exporting', 'dest': 'resetting', 'before': 'on_export_finished_event'},
    {'trigger': 'reset_done_event', 'source': 'resetting', 'dest': 'idle', 'before': 'on_reset_done_event'},
    {'trigger': 'cycle_aborted_event', 'source': '*', 'dest': 'idle', 'before': 'on_cycle_aborted_event'},
]


# Define a class to hold the state machine
class CycleStateMachine(object):
    def __init__(self):
        self.machine = Machine(model=self, states=states, transitions=transitions, initial='idle')

    def on_cycle_started_event(self):
        assert self.state == 'idle'
        logger.debug(f"Cycle started: {self.state} -> collecting")

    def on_sample_collected_event(self):
        assert self.state == 'collecting'
        logger.debug(f"Sample collected: {self.state} -> appending")

    def on_sample_appended_event(self):
        assert self.state == 'appending'
        logger.debug(f"Sample appended: {self.state} -> threshold_check")

    def on_threshold_reached_event(self):
        assert self.state == 'threshold_check'
        logger.debug(f"Threshold reached: {self.state} -> exporting")

    def on_threshold_not_reached_event(self):
        assert self.state == 'threshold_check'
        logger.debug(f"Threshold not reached: {self.state} -> idle")

    def on_export_finished_event(self):
        assert self.state == 'exporting'
        logger.debug(f"Export finished: {self.state} -> resetting")

    def on_reset_done_event(self):
        assert self.state == 'resetting'
        logger.debug(f"Log reset: {self.state} -> idle")

    def on_cycle_aborted_event(self):
        logger.debug(f"Cycle aborted: {self.state} -> idle")
