from narrow4df.storage.storage import Storage
from narrow4df.storage.arrow_storage import ArrowStorage
from narrow4df.storage.delta_storage import DeltaStorage
