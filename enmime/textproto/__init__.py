"""Text protocol readers, writers, pipelines, connections and MIME header handling."""